"""Shared test fixtures for pmu-events tests."""

import logging
import os

import pytest

from pmu_events.tokenizer import tokenize
from pmu_events.translator import EventTranslator

HASWELL_EVENTS = """[
    {
        "EventCode": "0xC0",
        "UMask": "0x0",
        "EventName": "INST_RETIRED.ANY_P",
        "BriefDescription": "Number of instructions retired. General Counter   - architectural event",
        "Counter": "0,1,2,3",
        "SampleAfterValue": "2000003",
        "Errata": "HSD11, HSD140"
    },
    {
        "EventCode": "0xCD",
        "UMask": "0x1",
        "EventName": "MEM_TRANS_RETIRED.LOAD_LATENCY_GT_4",
        "BriefDescription": "Randomly selected loads with latency value being above 4.",
        "PEBS": "2",
        "MSRIndex": "0x3F6",
        "MSRValue": "0x4",
        "SampleAfterValue": "100003",
        "Errata": "null",
        "Data_LA": "1"
    },
    {
        "EventCode": "0xB7, 0xBB",
        "UMask": "0x1",
        "EventName": "OFFCORE_RESPONSE",
        "BriefDescription": "Offcore response can be programmed only with a specific pair of event select and counter MSR.",
        "MSRIndex": "0x1a6,0x1a7",
        "MSRValue": "0x0",
        "SampleAfterValue": "100003",
        "Offcore": "1"
    }
]
"""

INST_RETIRED_ANY = (
    '[{"EventName":"INST_RETIRED.ANY","EventCode":"0xc0","UMask":"0x0",'
    '"BriefDescription":"Instructions retired."}]'
)


class Recorder:
    """Callback that records every event it is handed."""

    def __init__(self, stop_at=None, result=1):
        self.calls = []
        self.data = []
        self.stop_at = stop_at
        self.result = result

    def __call__(self, data, name, event, desc):
        self.calls.append((name, event, desc))
        self.data.append(data)
        if self.stop_at is not None and len(self.calls) == self.stop_at:
            return self.result
        return 0


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the user's environment and config files out of the tests."""
    for key in ("EVENTMAP", "XDG_CACHE_HOME"):
        monkeypatch.delenv(key, raising=False)
    for key in list(os.environ):
        if key.startswith("PMU_EVENTS_"):
            monkeypatch.delenv(key)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    yield
    logger = logging.getLogger("pmu_events")
    logger.setLevel(logging.NOTSET)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def translate():
    """Run a fresh translator over a JSON string.

    Returns (result, calls, translator).
    """

    def _translate(text, callback=None, translator=None):
        callback = callback or Recorder()
        translator = translator or EventTranslator()
        result = translator.translate(text, tokenize(text), callback)
        return result, callback.calls, translator

    return _translate


@pytest.fixture
def event_file(tmp_path):
    """Write JSON text to a file and return its path."""

    def _write(text, name="events.json"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def cpuinfo(tmp_path):
    """A cpuinfo file for a Haswell client part."""
    path = tmp_path / "cpuinfo"
    path.write_text(
        "processor\t: 0\n"
        "vendor_id\t: GenuineIntel\n"
        "cpu family\t: 6\n"
        "model\t\t: 60\n"
        "model name\t: Intel(R) Core(TM) i7-4770 CPU @ 3.40GHz\n"
        "stepping\t: 3\n"
        "\n"
        "processor\t: 1\n"
        "vendor_id\t: GenuineIntel\n"
        "cpu family\t: 6\n"
        "model\t\t: 61\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def make_recorder():
    """Factory for recorders that stop after ``stop_at`` events."""
    return Recorder


@pytest.fixture
def haswell_json():
    return HASWELL_EVENTS


@pytest.fixture
def inst_retired_json():
    return INST_RETIRED_ANY
