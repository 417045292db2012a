"""Property-based tests for row <-> result mapping."""

from __future__ import annotations

import string
from datetime import datetime

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from pathstore.schemas.select import SelectOptions
from pathstore.services.record_codec import base_name, byte_size, make_file_path, project_result

PROPERTY_SETTINGS = settings(
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)

_SEGMENT = st.text(alphabet=string.ascii_letters + string.digits + "-_", min_size=1, max_size=12)
_DIR = st.lists(_SEGMENT, min_size=1, max_size=4).map("/".join)
_COLUMNS = st.sets(st.sampled_from(["fileName", "content", "mtime", "record"]), min_size=1)

_ROW = {
    "source": "s",
    "path": "d/f.md",
    "content": "x",
    "updated_at": datetime(2026, 1, 1),
}


class TestRecordCodecProperties:
    @PROPERTY_SETTINGS
    @given(content=st.text())
    def test_byte_size_bounds_character_count(self, content: str) -> None:
        size = byte_size(content)

        assert len(content) <= size <= 4 * len(content)

    @PROPERTY_SETTINGS
    @given(content=st.text(alphabet=st.characters(min_codepoint=0x10000, max_codepoint=0x10FFFF)))
    def test_astral_characters_take_four_bytes(self, content: str) -> None:
        assert byte_size(content) == 4 * len(content)

    @PROPERTY_SETTINGS
    @given(dir_name=_DIR, file_name=_SEGMENT, extension=_SEGMENT)
    def test_base_name_recovers_file_name(
        self, dir_name: str, file_name: str, extension: str
    ) -> None:
        path = make_file_path(dir_name, file_name, extension)

        assert base_name(path) == f"{file_name}.{extension}"
        assert path.startswith(dir_name + "/")

    @PROPERTY_SETTINGS
    @given(columns=_COLUMNS)
    def test_projection_keys_equal_requested_columns(self, columns: set[str]) -> None:
        options = SelectOptions.model_validate({"columns": sorted(columns)})

        assert set(project_result("f.md", _ROW, options)) == columns
