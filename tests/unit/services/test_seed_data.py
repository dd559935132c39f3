"""Unit tests for bundled seed data."""
from springlog.models.registration import CommutePreference
from springlog.services.seed_data import load_seed_registrations


def test_five_rows_in_given_order():
    registrations = load_seed_registrations()

    assert [r.id for r in registrations] == [f"mock-{i}" for i in range(5)]
    assert registrations[0].name == "张小龙"
    assert registrations[-1].name == "李彦宏"


def test_business_keys_are_unique():
    keys = [r.employee_identifier for r in load_seed_registrations()]
    assert len(set(keys)) == len(keys)


def test_labels_are_mapped():
    by_key = {r.employee_identifier: r for r in load_seed_registrations()}

    assert by_key["EMP-1001"].commute_preference is CommutePreference.OFFERS_RIDE
    assert by_key["EMP-1002"].commute_preference is CommutePreference.NEEDS_RIDE
    assert by_key["EMP-1002"].dietary_preference == "Vegetarian"
    assert by_key["EMP-1004"].dietary_preference == "Halal"
    assert by_key["EMP-1005"].dietary_preference == "Allergy: 海鲜"


def test_each_call_returns_fresh_objects():
    first = load_seed_registrations()
    second = load_seed_registrations()

    first[0].name = "changed"

    assert second[0].name == "张小龙"


def test_custom_csv():
    csv_text = "\n".join([
        "header",
        "王五,E9,139,未知,,自驾,2026-03-22 10:00:00",
    ])

    registrations = load_seed_registrations(csv_text)

    assert len(registrations) == 1
    assert registrations[0].dietary_preference == "Other"
