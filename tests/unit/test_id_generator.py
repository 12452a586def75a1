"""Unit tests for id generation."""

import re
import uuid
from datetime import datetime

import pytest

from src.wm_common.id_generator import (
    generate_id,
    generate_order_group_id,
    normalize_id,
)

_GROUP_RE = re.compile(r"^ORD-\d{8}-\d{6}-[A-Z0-9]{3}$")


def test_generate_id_is_uuid4() -> None:
    value = generate_id()
    assert uuid.UUID(value).version == 4


def test_generate_id_unique() -> None:
    assert len({generate_id() for _ in range(100)}) == 100


def test_order_group_id_format() -> None:
    assert _GROUP_RE.match(generate_order_group_id())


def test_order_group_id_uses_given_time() -> None:
    group = generate_order_group_id(datetime(2026, 10, 16, 9, 5, 7))
    assert group.startswith("ORD-20261016-090507-")


def test_normalize_id_lowercases_and_hyphenates() -> None:
    pid = "30f14e75-6f2b-4d5e-9a1c-0b7e2c3d4f5a"
    assert normalize_id(pid.upper()) == pid
    assert normalize_id(pid.replace("-", "")) == pid
    assert normalize_id("{" + pid + "}") == pid


def test_normalize_id_rejects_malformed() -> None:
    with pytest.raises(ValueError):
        normalize_id("abc")
    with pytest.raises(ValueError):
        normalize_id("")
