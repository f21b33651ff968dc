from unittest.mock import patch

import pytest
from pydantic import ValidationError

from sortable_ids.ids.config import GeneratorConfig


class TestGeneratorConfig:
    def test_explicit_seed(self):
        with patch.dict("os.environ", {}, clear=True):
            assert GeneratorConfig(seed=42).seed == 42

    def test_seed_from_env(self):
        with patch.dict("os.environ", {"SORTABLE_IDS_SEED": "1234"}):
            assert GeneratorConfig().seed == 1234

    def test_seed_from_env_accepts_hex(self):
        with patch.dict("os.environ", {"SORTABLE_IDS_SEED": "0x2A"}):
            assert GeneratorConfig().seed == 42

    def test_explicit_seed_overrides_env(self):
        with patch.dict("os.environ", {"SORTABLE_IDS_SEED": "1234"}):
            assert GeneratorConfig(seed=7).seed == 7

    def test_invalid_env_seed_falls_back_to_urandom(self):
        with patch.dict("os.environ", {"SORTABLE_IDS_SEED": "not-a-number"}):
            with patch(
                "sortable_ids.ids.config.os.urandom",
                return_value=b"\x00" * 7 + b"\x09",
            ):
                assert GeneratorConfig().seed == 9

    def test_missing_seed_drawn_from_urandom(self):
        with patch.dict("os.environ", {}, clear=True):
            with patch(
                "sortable_ids.ids.config.os.urandom", return_value=b"\xff" * 8
            ) as mock_urandom:
                config = GeneratorConfig()

        mock_urandom.assert_called_once_with(8)
        assert config.seed == 2**64 - 1

    @pytest.mark.parametrize("seed", [-1, 2**64])
    def test_rejects_out_of_range_seed(self, seed):
        with pytest.raises(ValidationError):
            GeneratorConfig(seed=seed)

    def test_rejects_out_of_range_env_seed(self):
        with patch.dict("os.environ", {"SORTABLE_IDS_SEED": "-3"}):
            with pytest.raises(ValidationError):
                GeneratorConfig()
