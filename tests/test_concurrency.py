"""
Fan-out Helper Tests

Author: SafeEscape Project
License: AGPL-3.0
"""

import asyncio

import pytest

from safeescape.core.concurrency import gather_isolated
from safeescape.core.exceptions import ProviderError


async def _value(value, delay=0.0):
    await asyncio.sleep(delay)
    return value


async def _fail(error):
    raise error


@pytest.mark.asyncio
async def test_outcomes_follow_input_order():
    outcomes = await gather_isolated(["slow", "fast"], [_value("a", 0.05), _value("b")])

    assert [o.label for o in outcomes] == ["slow", "fast"]
    assert [o.value for o in outcomes] == ["a", "b"]
    assert all(o.ok for o in outcomes)


@pytest.mark.asyncio
async def test_failure_is_isolated():
    outcomes = await gather_isolated(["bad", "good"], [_fail(KeyError("x")), _value(1)])

    assert not outcomes[0].ok
    assert isinstance(outcomes[0].error, KeyError)
    assert outcomes[1].value == 1


@pytest.mark.asyncio
async def test_timeout_becomes_provider_error():
    outcomes = await gather_isolated(["stuck", "quick"], [_value(1, delay=5.0), _value(2)], timeout=0.05)

    assert isinstance(outcomes[0].error, ProviderError)
    assert "stuck" in str(outcomes[0].error)
    assert outcomes[1].value == 2


@pytest.mark.asyncio
async def test_length_mismatch_rejected():
    with pytest.raises(ValueError):
        await gather_isolated(["one"], [])


@pytest.mark.asyncio
async def test_empty_input():
    assert await gather_isolated([], []) == []
