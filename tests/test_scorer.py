from leadgen.models import BusinessCandidate, IdealCustomerProfile, WebsiteAnalysis
from leadgen.scorer import band, calculate_lead_score


def _icp(industry: str = "diner", location: str = "Austin, TX") -> IdealCustomerProfile:
    return IdealCustomerProfile(target_industries=(industry,), target_location=location)


def test_scorer_not_analyzed_small_diner() -> None:
    business = BusinessCandidate(name="Joe's Diner", rating=3.2, review_count=5, phone="555-1234")

    result = calculate_lead_score(business, None, _icp())

    assert result.factors.website_opportunity == 15
    assert result.factors.business_signals == 25
    assert result.factors.icp_match == 12
    assert result.factors.contact_availability == 8
    assert result.score == 60
    assert result.breakdown == [
        "Website not analyzed (+15)",
        "Low rating 3.2 (+15)",
        "Few reviews (5) (+10)",
        "Industry match (+12)",
        "Phone available (+8)",
    ]


def test_scorer_no_website_established_business() -> None:
    business = BusinessCandidate(
        name="Acme Plumbing",
        address="12 Main St, Denver, CO",
        rating=4.8,
        review_count=200,
    )
    analysis = WebsiteAnalysis(status="none", score=100, issues=[])

    result = calculate_lead_score(business, analysis, _icp(industry="bakery"))

    assert result.factors.website_opportunity == 40
    assert result.factors.business_signals == 3
    assert result.factors.icp_match == 0
    assert result.factors.contact_availability == 0
    assert result.score == 43
    assert result.breakdown == ["No website (+40)", "Good rating - established business (+3)"]


def test_scorer_issue_bonus_is_capped() -> None:
    business = BusinessCandidate(name="Shop")
    many_issues = [f"issue {n}" for n in range(10)]

    broken = calculate_lead_score(business, WebsiteAnalysis(status="broken", score=90, issues=many_issues), _icp())
    good = calculate_lead_score(business, WebsiteAnalysis(status="good", score=5, issues=many_issues), _icp())

    assert broken.factors.website_opportunity == 40
    assert broken.breakdown[:2] == ["Broken website (+35)", "Multiple issues (+10)"]
    assert good.factors.website_opportunity == 15


def test_scorer_small_issue_bonus() -> None:
    analysis = WebsiteAnalysis(status="outdated", score=30, issues=["a", "b", "c", "d", "e"])

    result = calculate_lead_score(BusinessCandidate(name="Shop"), analysis, _icp())

    assert result.factors.website_opportunity == 24
    assert result.breakdown[:2] == ["Outdated website (+20)", "Multiple issues (+4)"]


def test_scorer_three_issues_earn_no_bonus() -> None:
    analysis = WebsiteAnalysis(status="poor", score=60, issues=["a", "b", "c"])

    result = calculate_lead_score(BusinessCandidate(name="Shop"), analysis, _icp())

    assert result.factors.website_opportunity == 30
    assert "Multiple issues" not in " ".join(result.breakdown)


def test_scorer_mid_rating_and_many_reviews_contribute_nothing() -> None:
    business = BusinessCandidate(name="Shop", rating=4.2, review_count=50)

    result = calculate_lead_score(business, None, _icp())

    assert result.factors.business_signals == 0
    assert result.breakdown == ["Website not analyzed (+15)"]


def test_scorer_moderate_rating_growing_business() -> None:
    business = BusinessCandidate(name="Shop", rating=3.5, review_count=10)

    result = calculate_lead_score(business, None, _icp())

    assert result.factors.business_signals == 13
    assert result.breakdown[1:] == ["Moderate rating 3.5 (+8)", "Growing business (10 reviews) (+5)"]


def test_scorer_icp_match_uses_type_and_address_case_insensitively() -> None:
    business = BusinessCandidate(
        name="Sunrise",
        business_type="Family DINER",
        address="100 Congress Ave, AUSTIN, TX 78701",
        phone="512-555-0100",
        website="https://sunrise.example",
    )

    result = calculate_lead_score(business, None, _icp())

    assert result.factors.icp_match == 20
    assert result.factors.contact_availability == 12
    assert result.breakdown[-4:] == [
        "Industry match (+12)",
        "Location match (+8)",
        "Phone available (+8)",
        "Website exists (+4)",
    ]


def test_scorer_business_type_takes_precedence_over_name() -> None:
    business = BusinessCandidate(name="Joe's Diner", business_type="Coffee shop")

    result = calculate_lead_score(business, None, _icp())

    assert result.factors.icp_match == 0


def test_scorer_buckets_respect_caps_and_total() -> None:
    business = BusinessCandidate(
        name="Downtown Diner",
        address="1 Main St, Austin, TX",
        phone="555-0000",
        website="diner.example",
        rating=1.0,
        review_count=0,
    )
    analysis = WebsiteAnalysis(status="none", score=100, issues=["x"] * 20)

    result = calculate_lead_score(business, analysis, _icp())

    assert result.factors.website_opportunity <= 40
    assert result.factors.business_signals <= 25
    assert result.factors.icp_match <= 20
    assert result.factors.contact_availability <= 15
    assert result.score == result.factors.total == 97
    assert 0 <= result.score <= 100


def test_scorer_none_status_beats_good_status() -> None:
    business = BusinessCandidate(name="Shop", rating=4.1)
    issues = ["a", "b", "c", "d"]

    none_result = calculate_lead_score(business, WebsiteAnalysis(status="none", score=100, issues=issues), _icp())
    good_result = calculate_lead_score(business, WebsiteAnalysis(status="good", score=5, issues=issues), _icp())

    assert none_result.factors.website_opportunity >= good_result.factors.website_opportunity


def test_scorer_is_deterministic() -> None:
    business = BusinessCandidate(name="Joe's Diner", rating=3.9, review_count=12, phone="555-1234")
    analysis = WebsiteAnalysis(status="poor", score=55, issues=["Missing page title - poor SEO"])

    first = calculate_lead_score(business, analysis, _icp())
    second = calculate_lead_score(business, analysis, _icp())

    assert first == second


def test_band() -> None:
    assert band(70) == "High"
    assert band(50) == "Medium"
    assert band(49) == "Low"
