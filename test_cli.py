import io
import sqlite3
import struct
import sys

import pytest
import yaml

import bench_compute
import enumerate_state_values
import md5_cli


def test_cli_message(capsys):
    assert md5_cli.main(["abc"]) == 0
    assert capsys.readouterr().out.strip() == "900150983cd24fb0d6963f7d28e17f72"


def test_cli_message_upper(capsys):
    assert md5_cli.main(["--upper", "abc"]) == 0
    assert capsys.readouterr().out.strip() == "900150983CD24FB0D6963F7D28E17F72"


def test_cli_utf8_message(capsys):
    assert md5_cli.main(["héllo"]) == 0
    expected = md5_cli.compute("héllo".encode("utf-8")).hexdigest()
    assert capsys.readouterr().out.strip() == expected


@pytest.mark.parametrize("chunk_size", [1, 7, 64, 65536])
def test_cli_file(tmp_path, capsys, chunk_size):
    path = tmp_path / "input.bin"
    data = bytes(range(256)) * 3
    path.write_bytes(data)
    assert md5_cli.main(["-f", str(path), "--chunk-size", str(chunk_size)]) == 0
    assert capsys.readouterr().out.strip() == md5_cli.compute(data).hexdigest()


def test_cli_stdin(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"message digest")))
    assert md5_cli.main(["-f", "-"]) == 0
    assert capsys.readouterr().out.strip() == "f96b697d7cb7938d525a2f31aaf161d0"


def test_cli_missing_file(tmp_path, capsys):
    missing = tmp_path / "nope.bin"
    assert md5_cli.main(["-f", str(missing)]) == 1
    assert "Error reading file" in capsys.readouterr().err


def test_cli_requires_input(capsys):
    assert md5_cli.main([]) == 1
    assert "usage" in capsys.readouterr().err


def test_cli_rejects_bad_chunk_size(capsys):
    assert md5_cli.main(["-f", "whatever", "--chunk-size", "0"]) == 1
    assert "--chunk-size" in capsys.readouterr().err


def test_cli_message_and_file_are_exclusive():
    with pytest.raises(SystemExit):
        md5_cli.main(["abc", "-f", "x"])


def test_enumerate_messages():
    assert list(enumerate_state_values.enumerate_messages(0)) == [b""]
    messages = list(enumerate_state_values.enumerate_messages(1))
    assert len(messages) == 256
    assert messages[0] == b"\x00"
    assert messages[-1] == b"\xff"


def test_enumerate_yaml(tmp_path, capsys):
    assert enumerate_state_values.main(["1", "--output-dir", str(tmp_path)]) == 0
    with open(tmp_path / "1.yaml") as f:
        results = yaml.safe_load(f)

    assert results["message_length_bytes"] == 1
    assert results["total_messages"] == 256
    entry = results["messages"][ord("a")]
    assert entry["message_hex"] == "61"
    assert entry["digest_hex"] == "0cc175b9c0f1b6a831c399e269772661"

    # A one-byte message pads into a single block whose final state is the digest.
    assert len(entry["blocks"]) == 1
    words = [int(word, 16) for word in entry["blocks"][0]["state"]]
    assert struct.pack("<4I", *words).hex() == entry["digest_hex"]
    assert "Done!" in capsys.readouterr().out


def test_enumerate_sqlite(tmp_path):
    assert enumerate_state_values.main(["0", "--format", "sqlite", "--output-dir", str(tmp_path)]) == 0
    conn = sqlite3.connect(tmp_path / "0.db")
    try:
        assert conn.execute("SELECT * FROM metadata").fetchall() == [(0, 1)]
        assert conn.execute("SELECT message_hex, digest_hex FROM messages").fetchall() == [
            ("", "d41d8cd98f00b204e9800998ecf8427e")
        ]
        assert conn.execute("SELECT a, b, c, d FROM states").fetchall() == [
            ("d98c1dd4", "04b2008f", "980980e9", "7e42f8ec")
        ]
    finally:
        conn.close()


def test_enumerate_respects_max_messages(tmp_path, capsys):
    assert enumerate_state_values.main(["3", "--max-messages", "10", "--output-dir", str(tmp_path)]) == 1
    assert "Too many messages" in capsys.readouterr().out


def test_bench(capsys):
    assert bench_compute.main(["--sizes", "0", "100", "--repeat", "1"]) == 0
    out = capsys.readouterr().out
    assert "compute" in out
    assert out.count("\n") == 2
    assert bench_compute.bench(64, repeat=1) >= 0
