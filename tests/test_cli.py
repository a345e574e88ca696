"""
Tests for the blockmerkle command line driver.
"""

import json
import logging

import pytest

from blockmerkle.cli.main import create_parser, main
from blockmerkle.merkle.tree import build
from blockmerkle.core.digest import Hasher


@pytest.fixture(autouse=True)
def reset_cli_logging():
    logger = logging.getLogger("blockmerkle")
    before = list(logger.handlers)
    yield
    for handler in [h for h in logger.handlers if h not in before]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def block_files(tmp_path, transactions):
    paths = []
    for i, data in enumerate(transactions):
        path = tmp_path / f"block{i}.bin"
        path.write_bytes(data)
        paths.append(str(path))
    return paths


class TestCLIParser:
    def test_commands_exist(self):
        parser = create_parser()

        assert parser.parse_args(["demo"]).command == "demo"
        assert parser.parse_args(["root", "a", "b"]).files == ["a", "b"]
        args = parser.parse_args(["prove", "--index", "2", "a", "b", "c"])
        assert args.index == 2
        args = parser.parse_args(["verify", "--root", "00", "--proof", "p.json", "f"])
        assert args.file == "f"

    def test_global_options(self):
        args = create_parser().parse_args(["--algorithm", "sha512", "--log-level", "debug", "demo"])

        assert args.algorithm == "sha512"
        assert args.log_level == "DEBUG"

    def test_prove_requires_target_or_index(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["prove", "a"])

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out


class TestDemo:
    def test_demo(self, capsys):
        assert main(["demo"]) == 0

        out = capsys.readouterr().out
        assert "Verified: True" in out
        assert "Verified with 'transaction1x': False" in out
        assert "Unbalanced Root (after adding data):" in out

    def test_demo_root_matches_library(self, capsys, transactions):
        main(["demo"])

        root = build(transactions, Hasher("sha256")).root_digest.hex()
        assert f"Merkle Root: {root}" in capsys.readouterr().out

    def test_demo_other_algorithm(self, capsys):
        assert main(["--algorithm", "blake2b", "demo"]) == 0
        assert "Algorithm:   blake2b" in capsys.readouterr().out

    def test_unknown_algorithm(self, capsys):
        assert main(["--algorithm", "md4", "demo"]) == 2
        assert "Unsupported hash algorithm" in capsys.readouterr().err


class TestRootProveVerify:
    def test_root(self, capsys, block_files, transactions):
        assert main(["root", *block_files]) == 0

        expected = build(transactions, Hasher("sha256")).root_digest.hex()
        assert capsys.readouterr().out.strip() == expected

    def test_prove_then_verify(self, capsys, tmp_path, block_files):
        main(["root", *block_files])
        root = capsys.readouterr().out.strip()

        assert main(["prove", "--target", block_files[2], *block_files]) == 0
        proof_path = tmp_path / "proof.json"
        proof_path.write_text(capsys.readouterr().out, encoding="utf-8")
        assert json.loads(proof_path.read_text(encoding="utf-8"))["leafIndex"] == 2

        assert main(["verify", "--root", root, "--proof", str(proof_path), block_files[2]]) == 0
        assert capsys.readouterr().out.strip() == "OK"

        assert main(["verify", "--root", root, "--proof", str(proof_path), block_files[1]]) == 1
        assert capsys.readouterr().out.strip() == "FAILED"

    def test_prove_by_index(self, capsys, block_files):
        assert main(["prove", "--index", "3", *block_files]) == 0

        document = json.loads(capsys.readouterr().out)
        assert document["leafIndex"] == 3
        assert [s["side"] for s in document["steps"]] == ["left", "left"]

    def test_prove_missing_target(self, capsys, tmp_path, block_files):
        stray = tmp_path / "stray.bin"
        stray.write_bytes(b"transaction5")

        assert main(["prove", "--target", str(stray), *block_files]) == 1
        assert "not in the tree" in capsys.readouterr().err

    def test_prove_index_out_of_range(self, capsys, block_files):
        assert main(["prove", "--index", "9", *block_files]) == 1
        assert "Invalid leaf index" in capsys.readouterr().err

    def test_verify_bad_root(self, capsys, tmp_path, block_files):
        proof_path = tmp_path / "proof.json"
        proof_path.write_text("{}", encoding="utf-8")

        assert main(["verify", "--root", "xyz", "--proof", str(proof_path), block_files[0]]) == 2

    def test_verify_malformed_proof(self, capsys, tmp_path, block_files):
        proof_path = tmp_path / "proof.json"
        proof_path.write_text("not json", encoding="utf-8")

        assert main(["verify", "--root", "00", "--proof", str(proof_path), block_files[0]]) == 2
        assert "cannot read proof" in capsys.readouterr().err

    def test_missing_file(self, capsys, tmp_path):
        assert main(["root", str(tmp_path / "absent.bin")]) == 2


class TestCLIErrors:
    def test_invalid_configured_algorithm(self, capsys, monkeypatch):
        """A bad BLOCKMERKLE_HASH_ALGORITHM is reported, not raised."""
        from blockmerkle.core.settings import get_settings

        monkeypatch.setenv("BLOCKMERKLE_HASH_ALGORITHM", "md4")
        get_settings.cache_clear()

        assert main(["demo"]) == 2
        assert "invalid configuration" in capsys.readouterr().err

    def test_invalid_configured_algorithm_with_log_level(self, capsys, monkeypatch):
        from blockmerkle.core.settings import get_settings

        monkeypatch.setenv("BLOCKMERKLE_HASH_ALGORITHM", "md4")
        get_settings.cache_clear()

        assert main(["--log-level", "INFO", "demo"]) == 2
        assert "Unsupported hash algorithm" in capsys.readouterr().err

    def test_reading_blocks_is_logged(self, caplog, block_files):
        with caplog.at_level(logging.DEBUG, logger="blockmerkle.cli"):
            assert main(["--log-level", "DEBUG", "root", *block_files]) == 0

        assert "Read 4 blocks from files" in caplog.text
