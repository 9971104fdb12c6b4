import pytest

from pico_factories import ConfigurationError, FileSource, MalformedRegistrationError, StringSource, YamlSource
from pico_factories.sources import parse_registrations


def test_parses_comma_separated_values_with_whitespace():
    text = "app.Shape = app.Circle ,  app.Square\napp.Codec=app.Json"
    assert parse_registrations(text, "t") == [
        ("app.Shape", "app.Circle"),
        ("app.Shape", "app.Square"),
        ("app.Codec", "app.Json"),
    ]


def test_skips_blank_lines_and_comments():
    text = "\n# comment\n! other comment\n   \napp.Shape=app.Circle\n"
    assert parse_registrations(text, "t") == [("app.Shape", "app.Circle")]


def test_line_continuation_and_colon_separator():
    text = "app.Shape: app.Circle,\\\n    app.Square,\\\n    app.Triangle\n"
    assert [v for _, v in parse_registrations(text, "t")] == ["app.Circle", "app.Square", "app.Triangle"]


def test_empty_values_are_dropped():
    assert parse_registrations("app.Shape=app.Circle,,  ,\napp.Empty=", "t") == [("app.Shape", "app.Circle")]


def test_entry_without_separator_is_malformed():
    with pytest.raises(MalformedRegistrationError, match=r"\[broken:2\]") as exc_info:
        parse_registrations("app.Shape=app.Circle\nnot an entry\n", "broken")
    assert exc_info.value.source == "broken"
    assert exc_info.value.line_no == 2


def test_empty_key_is_malformed():
    with pytest.raises(MalformedRegistrationError, match="empty factory type name"):
        parse_registrations("=app.Circle", "t")


def test_string_source_reports_its_name():
    src = StringSource("oops", name="inline")
    with pytest.raises(MalformedRegistrationError, match="inline"):
        list(src.registrations())


def test_file_source_reads_file(tmp_path):
    path = tmp_path / "pico.factories"
    path.write_text("app.Shape=app.Circle\n", encoding="utf-8")
    assert list(FileSource(path).registrations()) == [("app.Shape", "app.Circle")]


def test_file_source_missing_file_is_malformed(tmp_path):
    with pytest.raises(MalformedRegistrationError, match="unreadable"):
        list(FileSource(tmp_path / "missing").registrations())


def test_yaml_source_accepts_lists_and_strings(tmp_path):
    pytest.importorskip("yaml")
    path = tmp_path / "factories.yaml"
    path.write_text(
        "app.Shape:\n  - app.Circle\n  - ' app.Square '\napp.Codec: app.Json, app.Xml\napp.None:\n",
        encoding="utf-8",
    )
    assert list(YamlSource(path).registrations()) == [
        ("app.Shape", "app.Circle"),
        ("app.Shape", "app.Square"),
        ("app.Codec", "app.Json"),
        ("app.Codec", "app.Xml"),
    ]


def test_yaml_source_rejects_bad_shape(tmp_path):
    pytest.importorskip("yaml")
    path = tmp_path / "factories.yaml"
    path.write_text("- app.Circle\n", encoding="utf-8")
    with pytest.raises(MalformedRegistrationError, match="mapping"):
        list(YamlSource(path).registrations())

    path.write_text("app.Shape:\n  nested: app.Circle\n", encoding="utf-8")
    with pytest.raises(MalformedRegistrationError, match="list of strings"):
        list(YamlSource(path).registrations())


def test_yaml_source_without_pyyaml(tmp_path, monkeypatch):
    import builtins

    real_import = builtins.__import__

    def fake_import(name, *args, **kwargs):
        if name == "yaml":
            raise ImportError("no yaml")
        return real_import(name, *args, **kwargs)

    monkeypatch.setattr(builtins, "__import__", fake_import)
    with pytest.raises(ConfigurationError, match="PyYAML not installed"):
        list(YamlSource(tmp_path / "x.yaml").registrations())


def test_file_source_invalid_utf8_names_the_source(tmp_path):
    path = tmp_path / "pico.factories"
    path.write_bytes(b"app.Shape=app.\xff\xfeCircle\n")
    with pytest.raises(MalformedRegistrationError, match="pico.factories") as exc_info:
        list(FileSource(path).registrations())
    assert exc_info.value.source == str(path)
    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)


def test_yaml_source_invalid_utf8_names_the_source(tmp_path):
    pytest.importorskip("yaml")
    path = tmp_path / "factories.yaml"
    path.write_bytes(b"app.Shape: app.\xff\xfeCircle\n")
    with pytest.raises(MalformedRegistrationError, match="factories.yaml"):
        list(YamlSource(path).registrations())


def test_equals_separator_wins_over_colon_in_keys():
    text = "pkg.mod:Outer.Inner=pkg.impl:Outer.Impl, pkg.impl.Other"
    assert parse_registrations(text, "t") == [
        ("pkg.mod:Outer.Inner", "pkg.impl:Outer.Impl"),
        ("pkg.mod:Outer.Inner", "pkg.impl.Other"),
    ]
