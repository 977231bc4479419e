"""
Tests for the geogpx command line.
"""

from geogpx.cli import main


class TestCli:

    def test_convert(self, tmp_path, gpx10, capsys):
        src = tmp_path / "in.gpx"
        dst = tmp_path / "out.gpx"
        src.write_text(gpx10, encoding="utf-8")
        assert main([str(src), str(dst), "--gpx-version", "1.1"]) == 0
        assert "<metadata>" in dst.read_text(encoding="utf-8")
        assert "Converted" in capsys.readouterr().out

    def test_multiple_outputs(self, tmp_path, gpx11):
        src = tmp_path / "in.gpx"
        src.write_text(gpx11, encoding="utf-8")
        a, b = tmp_path / "a.gpx", tmp_path / "b.gpx"
        assert main([str(src), str(a), str(b), "--name", "Renamed"]) == 0
        assert a.read_text(encoding="utf-8") == b.read_text(encoding="utf-8")
        assert "<name>Renamed</name>" in a.read_text(encoding="utf-8")

    def test_info(self, tmp_path, gpx10, capsys):
        src = tmp_path / "in.gpx"
        src.write_text(gpx10, encoding="utf-8")
        assert main([str(src), "--info"]) == 0
        out = capsys.readouterr().out
        assert "GPX version: 1.0" in out
        assert "Waypoints: 1" in out
        assert "Andy Armstrong <andy@hexten.net>" in out
        assert "Bounds:" in out

    def test_summary_without_outputs(self, tmp_path, gpx10, capsys):
        src = tmp_path / "in.gpx"
        src.write_text(gpx10, encoding="utf-8")
        assert main([str(src)]) == 0
        assert "Read 6 points" in capsys.readouterr().out

    def test_legacy_flags(self, tmp_path, capsys):
        src = tmp_path / "in.gpx"
        dst = tmp_path / "out.gpx"
        src.write_text('<gpx version="1.0"><name>début</name><time>2006-11-25T21:01:43Z</time></gpx>',
                       encoding="utf-8")
        assert main([str(src), str(dst), "--legacy-entities", "--legacy-time"]) == 0
        text = dst.read_text(encoding="utf-8")
        assert "d&#xE9;but" in text
        assert "<time>2006-11-25T21:01:43.0000000+00:00</time>" in text

    def test_reports_written_version(self, tmp_path, capsys):
        src = tmp_path / "in.gpx"
        dst = tmp_path / "out.gpx"
        src.write_text('<gpx version="1.2"><name>N</name></gpx>', encoding="utf-8")
        assert main([str(src), str(dst)]) == 0
        assert "(GPX 1.1)" in capsys.readouterr().out
        assert 'version="1.1"' in dst.read_text(encoding="utf-8")

    def test_datetime_fractions(self, tmp_path):
        src = tmp_path / "in.gpx"
        src.write_text('<gpx version="1.0"><time>2006-11-25T21:01:43.5+01:00</time></gpx>',
                       encoding="utf-8")
        plain, legacy = tmp_path / "plain.gpx", tmp_path / "legacy.gpx"
        assert main([str(src), str(plain), "--datetime"]) == 0
        assert main([str(src), str(legacy), "--datetime", "--legacy-time"]) == 0
        assert "<time>2006-11-25T21:01:43+01:00</time>" in plain.read_text(encoding="utf-8")
        assert "<time>2006-11-25T21:01:43.5000000+01:00</time>" in legacy.read_text(encoding="utf-8")

    def test_missing_input(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.gpx")]) == 1
        assert "Error reading" in capsys.readouterr().err

    def test_malformed_input(self, tmp_path, capsys):
        src = tmp_path / "bad.gpx"
        src.write_text("<gpx>", encoding="utf-8")
        assert main([str(src)]) == 1
        assert "Error reading" in capsys.readouterr().err
