"""Shared fixtures for core unit tests"""

import pytest

from streampub.core.bind import bind, bind_cover
from streampub.core.models import Frame, ImageTable, RunStatus
from streampub.core.parse import parse_buffer


SAMPLE_STREAM = """\
大家好，欢迎阅读。
[TITLE: **Market** Overview]
Demand for #compute keeps rising.

[QUOTE：Cheap compute changes everything]
[HIGHLIGHT: Supply is the bottleneck]
[IMAGE: 1]
[LIST: Watch capacity]
[LIST: Track pricing]
[TABLE: Company | Edge | Risk \\n Alpha | Scale | Debt \\n Beta | Cost]
[IMAGE: 2]
Closing thoughts.
[封面锚点: Golden city skyline at dawn]
[视觉锚点1: Server racks glowing blue]
[视觉锚点2: Chip wafer close-up]
[视觉锚点3: Trading floor]"""

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 16


def _make_frame(text: str, table: ImageTable = None, run_id: int = 1) -> Frame:
    """Parse text and bind it against table into a finished Frame."""
    table = table or ImageTable()
    parsed = parse_buffer(text)
    return Frame(
        run_id=run_id,
        status=RunStatus.done,
        anchors=parsed.anchors,
        cover=bind_cover(table),
        entries=bind(parsed.blocks, table),
    )


@pytest.fixture(name="sample_stream")
def sample_stream_fixture():
    return SAMPLE_STREAM


@pytest.fixture(name="png")
def png_fixture():
    return PNG_BYTES


@pytest.fixture(name="jpeg")
def jpeg_fixture():
    return JPEG_BYTES


@pytest.fixture(name="make_frame")
def make_frame_fixture():
    return _make_frame
