"""Tests for the token inspection CLI."""

import pytest

from stampbook.jobs.inspect_token import main, parse_stamp_indices
from stampbook.services.share_codec import decode_token


class TestParseStampIndices:
    def test_indices(self) -> None:
        stamps = parse_stamp_indices("0, 5,29")
        assert [i for i, s in enumerate(stamps) if s] == [0, 5, 29]

    def test_empty(self) -> None:
        assert not any(parse_stamp_indices(""))

    def test_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            parse_stamp_indices("30")


class TestMain:
    def test_encode(self, capsys) -> None:
        assert main(["encode", "Ben", "--stamps", "0,5,29", "--theme", "1"]) == 0

        token, url = capsys.readouterr().out.splitlines()
        snapshot = decode_token(token)
        assert snapshot.stamp_count == 3
        assert snapshot.theme.value == "bg-indigo-500"
        assert url.endswith(f"?s={token}")

    def test_encode_bad_stamps(self) -> None:
        assert main(["encode", "Ben", "--stamps", "99"]) == 1

    def test_decode_token(self, capsys) -> None:
        main(["encode", "Ben", "--stamps", "1", "--created", "2024/1/5"])
        token = capsys.readouterr().out.splitlines()[0]

        assert main(["decode", token]) == 0

        out = capsys.readouterr().out
        assert "name:    Ben" in out
        assert "stamps:  1/30" in out
        assert "created: 2024/1/5" in out

    def test_decode_url(self, capsys) -> None:
        main(["encode", "Amy"])
        url = capsys.readouterr().out.splitlines()[1]

        assert main(["decode", url]) == 0
        assert "name:    Amy" in capsys.readouterr().out

    def test_decode_garbage(self) -> None:
        assert main(["decode", "!!!"]) == 1

    def test_url_without_token(self) -> None:
        assert main(["decode", "http://app.test/open"]) == 1
