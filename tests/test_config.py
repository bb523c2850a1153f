from datetime import datetime, timedelta

import pytest

from shorts_cutter.config import (
    FFMPEG_FILTER_COMPLEX,
    MAX_THREADS,
    OUTPUT_SUFFIX,
    AppConfig,
    default_thread_count,
    generate_log_filename,
)
from shorts_cutter.errors import ConfigError, InvalidArgument


def test_default_config_values():
    config = AppConfig()
    assert config.ffmpeg_filter_complex == FFMPEG_FILTER_COMPLEX
    assert config.supported_extensions == ["mp4"]
    assert config.output_suffix == OUTPUT_SUFFIX == "-short"
    assert config.ffmpeg_timeout == timedelta(seconds=600)
    assert config.max_threads == MAX_THREADS == 32
    assert config.console_log_level == "info"
    assert config.file_log_level == "debug"


def test_default_config_is_valid():
    config = AppConfig()
    config.validate()
    assert config.supported_extensions == ["mp4"]


def test_default_extensions_not_shared():
    first = AppConfig()
    second = AppConfig()
    first.supported_extensions.append("mov")
    assert second.supported_extensions == ["mp4"]


@pytest.mark.parametrize(
    "changes, message",
    [
        ({"supported_extensions": []}, "No supported file extensions configured"),
        ({"output_suffix": ""}, "Output suffix cannot be empty"),
        ({"ffmpeg_filter_complex": ""}, "FFmpeg filter complex cannot be empty"),
    ],
)
def test_validate_rejects_empty_fields(changes, message):
    config = AppConfig(**changes)
    with pytest.raises(InvalidArgument) as info:
        config.validate()
    assert info.value.message == message
    assert isinstance(info.value, ConfigError)


def test_default_thread_count_positive():
    assert default_thread_count() >= 1


def test_generate_log_filename_fixed_time():
    stamp = datetime(2024, 1, 2, 3, 4, 5)
    assert generate_log_filename(stamp) == "shorts-cutter-20240102-030405.log"


def test_generate_log_filename_uses_current_time():
    before = datetime.now().replace(microsecond=0)
    name = generate_log_filename()
    after = datetime.now()
    parsed = datetime.strptime(name, "shorts-cutter-%Y%m%d-%H%M%S.log")
    assert before <= parsed <= after