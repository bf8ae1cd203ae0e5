"""
Tests for buddy search filtering.
"""

import pytest
import pytest_asyncio
from golfbuddy.services import course_service, preference_service
from golfbuddy.services.search_service import search_buddies


@pytest_asyncio.fixture
async def golfers(make_user):
    """Three San Francisco golfers (two intermediate) and one in Portland."""
    return {
        "sf_intermediate_low": await make_user("sam", handicap=5),
        "sf_intermediate_none": await make_user("sue"),
        "sf_advanced": await make_user("sid", skill_level="advanced", handicap=-2),
        "portland_intermediate": await make_user("pat", location="Portland", handicap=25),
    }


def _ids(results):
    return [u["id"] for u in results]


@pytest.mark.asyncio
async def test_search_without_filters_returns_everyone(db_session, golfers):
    results = await search_buddies(db_session)
    assert sorted(_ids(results)) == sorted(golfers.values())


@pytest.mark.asyncio
async def test_search_location_and_skill_intersect(db_session, golfers):
    results = await search_buddies(
        db_session, location="San Francisco", skill_level="intermediate"
    )
    assert _ids(results) == [golfers["sf_intermediate_low"], golfers["sf_intermediate_none"]]


@pytest.mark.asyncio
async def test_search_location_is_exact(db_session, golfers):
    assert await search_buddies(db_session, location="san francisco") == []
    assert _ids(await search_buddies(db_session, location="Portland")) == [
        golfers["portland_intermediate"]
    ]


@pytest.mark.asyncio
async def test_search_handicap_keeps_users_without_handicap(db_session, golfers):
    results = await search_buddies(db_session, max_handicap_diff=10)
    ids = _ids(results)
    assert golfers["sf_intermediate_none"] in ids
    assert golfers["sf_intermediate_low"] in ids
    assert golfers["portland_intermediate"] not in ids


@pytest.mark.asyncio
async def test_search_handicap_uses_absolute_value(db_session, golfers):
    """Test a plus handicap (stored negative) is compared by magnitude."""
    results = await search_buddies(db_session, max_handicap_diff=2)
    assert _ids(results) == [golfers["sf_intermediate_none"], golfers["sf_advanced"]]

    results = await search_buddies(db_session, max_handicap_diff=1)
    assert _ids(results) == [golfers["sf_intermediate_none"]]


@pytest.mark.asyncio
async def test_search_handicap_zero_is_a_filter(db_session, golfers):
    """Test max_handicap_diff=0 is applied rather than treated as absent."""
    results = await search_buddies(db_session, max_handicap_diff=0)
    assert _ids(results) == [golfers["sf_intermediate_none"]]


@pytest.mark.asyncio
async def test_search_by_favorite_course(db_session, golfers):
    links = await course_service.create_course(db_session, "Lincoln Park", "San Francisco", 68)
    other = await course_service.create_course(db_session, "Eastmoreland", "Portland", 72)
    await preference_service.add_favorite_course(db_session, golfers["sf_advanced"], links["id"])
    await preference_service.add_favorite_course(
        db_session, golfers["portland_intermediate"], links["id"]
    )
    await preference_service.add_favorite_course(
        db_session, golfers["portland_intermediate"], other["id"]
    )

    results = await search_buddies(db_session, course_id=links["id"])
    assert _ids(results) == [golfers["sf_advanced"], golfers["portland_intermediate"]]

    results = await search_buddies(db_session, course_id=links["id"], location="Portland")
    assert _ids(results) == [golfers["portland_intermediate"]]


@pytest.mark.asyncio
async def test_search_unknown_course_returns_empty(db_session, golfers):
    assert await search_buddies(db_session, course_id=99999) == []


@pytest.mark.asyncio
async def test_search_by_time_preference(db_session, golfers):
    await preference_service.add_time_preference(db_session, golfers["sf_intermediate_low"], "morning")
    await preference_service.add_time_preference(db_session, golfers["sf_intermediate_low"], "weekend")
    await preference_service.add_time_preference(db_session, golfers["sf_advanced"], "weekend")

    results = await search_buddies(db_session, time_preference="weekend")
    assert _ids(results) == [golfers["sf_intermediate_low"], golfers["sf_advanced"]]

    results = await search_buddies(db_session, time_preference="morning", skill_level="advanced")
    assert results == []


@pytest.mark.asyncio
async def test_search_results_are_full_profiles(db_session, golfers):
    results = await search_buddies(db_session, location="Portland")
    user = results[0]
    assert user["username"] == "pat"
    assert user["handicap"] == 25
    assert user["skill_level"] == "intermediate"
    assert "email" in user


@pytest.mark.asyncio
async def test_search_negative_handicap_diff_keeps_only_unhandicapped(db_session, golfers):
    results = await search_buddies(db_session, max_handicap_diff=-1)
    assert _ids(results) == [golfers["sf_intermediate_none"]]
