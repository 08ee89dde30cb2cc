"""End-to-end tests for the command-line entrypoint."""

import json

import pytest

import main


EXPECTED_ROW = (
    "A great mug,Holds coffee well,a red mug on a table,Kitchen,https://x/mug-1,mug kitchen,https://x/mug-1.jpg"
)


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch):
    """Run each test from a scratch directory with the override unset."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ALLOW_PASTEL", raising=False)
    return tmp_path


class TestMainSuccess:
    """Test a clean run over valid input."""

    def test_reference_mug(self, workdir, write_input, mug_payload, capsys):
        main.main([str(write_input([mug_payload]))])

        seo = json.loads((workdir / "build" / "seo" / "mug-1.json").read_text(encoding="utf-8"))
        assert seo["meta_title"] == "A great mug"
        assert seo["product_handle"] == "mug-1"

        csv_text = (workdir / "build" / "pins" / "pins.csv").read_text(encoding="utf-8")
        assert csv_text.split("\n") == ["Title,Description,Alt Text,Board,URL,Tags,Image_URL", EXPECTED_ROW]

        assert capsys.readouterr().out == "Generated SEO and pins files for 1 products.\n"

    def test_n_products(self, workdir, write_input, mug_payload, capsys):
        products = [dict(mug_payload, handle=f"mug-{i}") for i in range(5)]
        main.main([str(write_input(products))])

        assert len(list((workdir / "build" / "seo").iterdir())) == 5
        assert len((workdir / "build" / "pins" / "pins.csv").read_text(encoding="utf-8").split("\n")) == 6
        assert "5 products" in capsys.readouterr().out

    def test_override_allows_banned_words(self, workdir, write_input, mug_payload, monkeypatch):
        monkeypatch.setenv("ALLOW_PASTEL", "true")
        main.main([str(write_input([dict(mug_payload, title="Pink Mug")]))])

        seo = json.loads((workdir / "build" / "seo" / "mug-1.json").read_text(encoding="utf-8"))
        assert seo["meta_title"] == "Pink Mug"
        csv_text = (workdir / "build" / "pins" / "pins.csv").read_text(encoding="utf-8")
        assert csv_text.split("\n")[1].startswith("Pink Mug,")

    def test_non_string_tags_are_joined(self, workdir, write_input, mug_payload):
        main.main([str(write_input([dict(mug_payload, tags=["mug", 2024])]))])

        row = (workdir / "build" / "pins" / "pins.csv").read_text(encoding="utf-8").split("\n")[1]
        assert ",mug 2024," in row

    def test_config_in_working_directory_is_used(self, workdir, write_input, mug_payload):
        (workdir / "config.yaml").write_text("paths:\n  seo_dir: out/meta\n", encoding="utf-8")
        main.main([str(write_input([mug_payload]))])

        assert (workdir / "out" / "meta" / "mug-1.json").exists()
        assert (workdir / "build" / "pins" / "pins.csv").exists()


class TestMainFailure:
    """Test that any error aborts the whole run."""

    def test_missing_argument_prints_usage(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main.main([])

        assert exc_info.value.code != 0
        assert "usage" in capsys.readouterr().err.lower()

    def test_banned_word_aborts(self, workdir, write_input, mug_payload, capsys):
        products = [
            mug_payload,
            dict(mug_payload, handle="mug-2", title="Pink Mug"),
            dict(mug_payload, handle="mug-3"),
        ]
        with pytest.raises(SystemExit) as exc_info:
            main.main([str(write_input(products))])

        assert exc_info.value.code == 1
        assert [p.name for p in (workdir / "build" / "seo").iterdir()] == ["mug-1.json"]
        assert not (workdir / "build" / "pins").exists()
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Banned word" in captured.err

    def test_override_other_than_true_still_blocks(self, workdir, write_input, mug_payload, monkeypatch):
        monkeypatch.setenv("ALLOW_PASTEL", "TRUE")
        with pytest.raises(SystemExit) as exc_info:
            main.main([str(write_input([dict(mug_payload, title="Pink Mug")]))])
        assert exc_info.value.code == 1

    def test_invalid_json_writes_nothing(self, workdir, capsys):
        path = workdir / "bad.json"
        path.write_text("not json", encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            main.main([str(path)])

        assert exc_info.value.code == 1
        assert not (workdir / "build").exists()

    def test_malformed_record_fails_at_first_use(self, workdir, write_input, mug_payload):
        """A record without tags still gets its SEO file; the pin pass then aborts."""
        broken = dict(mug_payload, handle="mug-2")
        del broken["tags"]
        with pytest.raises(SystemExit) as exc_info:
            main.main([str(write_input([mug_payload, broken]))])

        assert exc_info.value.code == 1
        assert sorted(p.name for p in (workdir / "build" / "seo").iterdir()) == ["mug-1.json", "mug-2.json"]
        assert not (workdir / "build" / "pins").exists()


class TestRun:
    """Test the pipeline function directly with injected config."""

    def test_run_returns_count(self, workdir, write_input, mug_payload):
        from pinmeta.utils import AppConfig

        assert main.run(write_input([mug_payload]), AppConfig()) == 1
        assert (workdir / "build" / "seo" / "mug-1.json").exists()
