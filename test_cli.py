"""
Tests for the command line interface.
"""

import json

from antiplag.cli import main
from antiplag.s3_storage import S3Storage


def run(capsys, argv):
    code = main(argv)
    return code, json.loads(capsys.readouterr().out)


def test_compare_identical_files(tmp_path, capsys):
    a = tmp_path / "a.txt"
    b = tmp_path / "b.txt"
    a.write_text("The quick brown fox")
    b.write_text("the quick, brown fox!")

    code, out = run(capsys, ["compare", str(a), str(b)])

    assert code == 0
    assert out["similarity"] == 100.0


def test_compare_different_files(tmp_path, capsys):
    a = tmp_path / "a.txt"
    b = tmp_path / "b.txt"
    a.write_text("abc")
    b.write_text("xyz")

    code, out = run(capsys, ["compare", str(a), str(b)])

    assert code == 0
    assert out["similarity"] == 0.0


def test_compare_missing_file(tmp_path, capsys):
    a = tmp_path / "a.txt"
    a.write_text("abc")

    code, out = run(capsys, ["compare", str(a), str(tmp_path / "missing.txt")])

    assert code == 1
    assert "missing.txt" in out["error"]


def test_compare_invalid_ngram_size(tmp_path, capsys):
    a = tmp_path / "a.txt"
    a.write_text("abc")

    code, out = run(capsys, ["compare", str(a), str(a), "--ngram-size", "0"])

    assert code == 1
    assert "ngram_size" in out["error"]


def test_scan_against_corpus(tmp_path, capsys):
    storage = S3Storage(base_path=str(tmp_path / "s3"), bucket_name="tasks")
    storage.put_object("original.txt", b"The quick brown fox")
    storage.put_object("other.txt", b"nothing alike")
    target = tmp_path / "target.txt"
    target.write_text("the quick brown fox")

    code, out = run(capsys, ["scan", str(target), "--storage", str(tmp_path / "s3")])

    assert code == 0
    assert out["plagiarism_percentage"] == 100.0
    assert out["is_plagiarism"] is True


def test_scan_excludes_own_key(tmp_path, capsys):
    storage = S3Storage(base_path=str(tmp_path / "s3"), bucket_name="tasks")
    storage.put_object("mine.txt", b"The quick brown fox")
    target = tmp_path / "target.txt"
    target.write_text("the quick brown fox")

    code, out = run(capsys, [
        "scan", str(target), "--storage", str(tmp_path / "s3"), "--key", "mine.txt",
    ])

    assert code == 0
    assert out["plagiarism_percentage"] == 0.0
    assert out["is_plagiarism"] is False
