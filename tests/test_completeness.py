from csn.engine.completeness import CompletenessEngine, percent_half_up
from csn.engine.rules import ChecklistRule, RuleSet, default_rule_set, flag
from csn.models import ProfileAggregate


FULL_PROFILE = ProfileAggregate(
    profile_photo_present=True,
    first_name="Jane",
    last_name="Doe",
    bio="Runs a small design studio.",
    company="Acme",
    position="Founder",
    city="Pune",
    phone_verified=True,
    email_verified=True,
    interest_count=5,
    has_social_links=True,
    has_accepted_connection=True,
)


def test_complete_profile_is_100():
    engine = CompletenessEngine()
    r = engine.compute(FULL_PROFILE, default_rule_set())
    assert r.completion_percentage == 100
    assert r.earned_points == r.total_points == 100
    assert r.missing == ()
    assert r.suggestions == ()
    assert r.completed == default_rule_set().keys()


def test_empty_profile_is_0_with_all_suggestions():
    engine = CompletenessEngine()
    r = engine.compute(ProfileAggregate(), default_rule_set())
    assert r.completion_percentage == 0
    assert r.earned_points == 0
    assert r.completed == ()
    assert [m.key for m in r.missing] == list(default_rule_set().keys())
    assert r.suggestions == (
        "Add a profile picture to boost trust",
        "Add at least 3 interests to improve discovery",
        "Write a bio to help others understand your business",
        "Complete your company and position details",
        "Make your first connection to start networking",
    )


def test_partial_profile_scenario():
    engine = CompletenessEngine()
    profile = ProfileAggregate(
        profile_photo_present=True,
        first_name="Jane",
        last_name="Doe",
        bio=None,
        company="Acme",
        position=None,
        city="  ",
        phone_verified=True,
        email_verified=True,
        interest_count=1,
        has_social_links=False,
        has_accepted_connection=False,
    )
    r = engine.compute(profile, default_rule_set())

    assert r.completed == ("profilePicture", "fullName", "phoneVerified", "emailVerified")
    assert r.earned_points == 45
    assert [m.key for m in r.missing] == [
        "bio", "companyPosition", "city", "interests", "socialLinks", "firstConnection",
    ]
    assert sum(m.points for m in r.missing) == 55
    assert r.completion_percentage == 45
    assert r.suggestions == (
        "Add at least 3 interests to improve discovery",
        "Write a bio to help others understand your business",
        "Complete your company and position details",
        "Make your first connection to start networking",
    )


def test_points_partition_adds_up_to_total():
    engine = CompletenessEngine()
    rules = default_rule_set()
    points = {rule.key: rule.points for rule in rules}
    profiles = [
        ProfileAggregate(),
        FULL_PROFILE,
        ProfileAggregate(first_name="A", last_name="B", interest_count=3, city="Goa"),
        ProfileAggregate(bio="  ", company="X", position="", email_verified=True),
    ]
    for profile in profiles:
        r = engine.compute(profile, rules)
        earned = sum(points[k] for k in r.completed)
        assert earned == r.earned_points
        assert earned + sum(m.points for m in r.missing) == r.total_points
        assert 0 <= r.completion_percentage <= 100


def test_interest_boundary():
    engine = CompletenessEngine()
    two = engine.compute(ProfileAggregate(interest_count=2), default_rule_set())
    three = engine.compute(ProfileAggregate(interest_count=3), default_rule_set())
    assert "interests" in [m.key for m in two.missing]
    assert "interests" in three.completed


def test_compute_is_idempotent():
    engine = CompletenessEngine()
    assert engine.compute(FULL_PROFILE, default_rule_set()) == engine.compute(FULL_PROFILE, default_rule_set())


def test_percent_rounds_half_up():
    assert percent_half_up(55, 100) == 55
    assert percent_half_up(67, 200) == 34  # 33.5
    assert percent_half_up(1, 3) == 33
    assert percent_half_up(2, 3) == 67
    assert percent_half_up(0, 7) == 0
    assert percent_half_up(7, 7) == 100


def test_custom_rule_set_order_drives_output_order():
    engine = CompletenessEngine()
    rules = RuleSet([
        ChecklistRule("emailVerified", "Email", 1, flag("email_verified")),
        ChecklistRule("phoneVerified", "Phone", 2, flag("phone_verified")),
    ])
    r = engine.compute(ProfileAggregate(), rules, templates=())
    assert [m.key for m in r.missing] == ["emailVerified", "phoneVerified"]
    assert r.total_points == 3
    assert r.suggestions == ()


def test_to_dict_uses_api_shape():
    r = CompletenessEngine().compute(ProfileAggregate(), default_rule_set())
    data = r.to_dict()
    assert data["completionPercentage"] == 0
    assert data["totalPoints"] == 100
    assert data["earnedPoints"] == 0
    assert data["missing"][0] == {
        "key": "profilePicture",
        "label": "Profile Picture",
        "points": 15,
        "route": "/dashboard/profile",
    }
    assert data["missing"][-1]["route"] == "/dashboard/home/connections"
