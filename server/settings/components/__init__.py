"""Shared helpers for settings components."""

from pathlib import Path

from decouple import AutoConfig

# Build paths inside the project like this: BASE_DIR.joinpath('some')
BASE_DIR = Path(__file__).parent.parent.parent.parent

# Values are read from the environment first, then from ``config/.env``
config = AutoConfig(search_path=BASE_DIR.joinpath('config'))
