"""Metric extraction tests — estimate heuristics and degradation to zero.

Maps to BDD specs: TestJobEstimate, TestUserEstimate, TestFieldTransform,
TestFactAndLinkCounts
"""

from __future__ import annotations

from langrank.ranking.metrics import (
    USER_ESTIMATE,
    FieldTransform,
    MetricContext,
    TransformKind,
    count_facts,
    count_inbound_links,
    predict_jobs,
    predict_users,
    round_half_up,
)


class TestJobEstimate:
    """REQUIREMENT: Job postings are estimated from LinkedIn skills and Indeed listings.

    WHO: Rank fusion's "jobs" metric
    WHAT: The estimate is round(latest linkedInSkill x 0.01) plus the latest
          indeedJobs count; only the most recent year of each series counts;
          an entity with neither series estimates 0
    WHY: Job demand is the strongest popularity signal but is sparse; most
         entities have no job data at all
    """

    def test_combines_linkedin_and_indeed(self, make_entity) -> None:
        """1,000,000 LinkedIn skills and 500 Indeed jobs estimate 10,500."""
        entity = make_entity(
            series={"linkedInSkill": {2022: "1000000"}, "indeedJobs": {2022: "500"}},
        )
        assert predict_jobs(entity) == 10_500

    def test_uses_most_recent_year_only(self, make_entity) -> None:
        """Older years of a series are ignored."""
        entity = make_entity(series={"indeedJobs": {2019: "9999", 2022: "40", 2020: "1"}})
        assert predict_jobs(entity) == 40

    def test_linkedin_share_rounds_half_up(self, make_entity) -> None:
        """150 skills x 0.01 = 1.5 rounds to 2."""
        entity = make_entity(series={"linkedInSkill": {2022: "150"}})
        assert predict_jobs(entity) == 2

    def test_missing_data_estimates_zero(self, make_entity) -> None:
        """An entity without job series estimates 0 instead of failing."""
        assert predict_jobs(make_entity()) == 0


class TestUserEstimate:
    """REQUIREMENT: Users are estimated as a weighted sum over optional fields.

    WHO: Rank fusion's "users" metric
    WHAT: Series fields contribute their latest value; direct counts
          contribute their integer value; presence fields contribute a flat
          constant; scaled fields multiply their value; absent and
          non-numeric fields contribute 0; the sum rounds to an integer
    WHY: No single source measures users, so several weak signals are
         combined, and a garbled field must not abort the whole build
    """

    def test_presence_constants_sum(self, make_entity) -> None:
        """A Wikipedia page (20) plus a package repository (1000) estimate 1020."""
        entity = make_entity(fields={"wikipedia": "https://w", "packageRepository": "https://p"})
        assert predict_users(entity) == 1020

    def test_direct_counts_are_added(self, make_entity) -> None:
        """Meetup members and GitHub stars add their values."""
        entity = make_entity(fields={"meetup members": "300", "githubRepo stars": "700"})
        assert predict_users(entity) == 1000

    def test_scaled_fields_multiply(self, make_entity) -> None:
        """40 daily page views x 5 plus 10 forks x 3 estimate 230."""
        entity = make_entity(
            fields={"wikipedia dailyPageViews": "40", "githubRepo forks": "10"},
        )
        assert predict_users(entity) == 230

    def test_series_fields_use_latest_year(self, make_entity) -> None:
        """Subreddit members count from the most recent year."""
        entity = make_entity(series={"subreddit memberCount": {2020: "5", 2023: "80"}})
        assert predict_users(entity) == 80

    def test_non_numeric_value_contributes_zero(self, make_entity) -> None:
        """A garbled star count degrades to 0 while other fields still count."""
        entity = make_entity(fields={"githubRepo stars": "lots", "website": "https://x"})
        assert predict_users(entity) == 1

    def test_leading_integer_is_read(self, make_entity) -> None:
        """'1200 (approx)' reads as 1200."""
        entity = make_entity(fields={"meetup members": "1200 (approx)"})
        assert predict_users(entity) == 1200

    def test_empty_entity_estimates_zero(self, make_entity) -> None:
        """No fields at all estimate 0 users."""
        assert predict_users(make_entity()) == 0

    def test_every_transform_names_a_distinct_field(self) -> None:
        """Each field appears once in the user estimate."""
        fields = [t.field for t in USER_ESTIMATE]
        assert len(fields) == len(set(fields))


class TestFieldTransform:
    """REQUIREMENT: Each transform kind contributes according to its rule.

    WHO: Estimate heuristics composed from FieldTransform tuples
    WHAT: CONSTANT contributes its factor when the field is present;
          SCALED multiplies the field's integer value; MOST_RECENT multiplies
          the latest series value; absent fields contribute 0
    WHY: Heuristics are configuration data evaluated uniformly; one
         misbehaving kind would skew every estimate that uses it
    """

    def test_constant_requires_presence(self, make_entity) -> None:
        """A blank field is absent and contributes nothing."""
        transform = FieldTransform("codeMirror", TransformKind.CONSTANT, 50)
        assert transform.contribution(make_entity(fields={"codeMirror": "js"})) == 50
        assert transform.contribution(make_entity(fields={"codeMirror": "  "})) == 0

    def test_scaled_multiplies_value(self, make_entity) -> None:
        transform = FieldTransform("x", TransformKind.SCALED, 2.5)
        assert transform.contribution(make_entity(fields={"x": "4"})) == 10

    def test_most_recent_falls_back_to_scalar(self, make_entity) -> None:
        """A series field given as a plain scalar still contributes."""
        transform = FieldTransform("linkedInSkill", TransformKind.MOST_RECENT)
        assert transform.contribution(make_entity(fields={"linkedInSkill": "77"})) == 77

    def test_round_half_up(self) -> None:
        """Halves round up, unlike Python's banker's rounding."""
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1
        assert round_half_up(2.49) == 2


class TestFactAndLinkCounts:
    """REQUIREMENT: Fact and inbound-link metrics count what the dataset records.

    WHO: Rank fusion's "facts" and "inbound_links" metrics
    WHAT: facts counts populated fields and non-empty series; inbound links
          count entries in the population-wide link map, 0 when absent
    WHY: Well-documented, widely-referenced entities are more influential
    """

    def test_fact_count_ignores_blank_fields(self, make_entity) -> None:
        entity = make_entity(
            fields={"a": "1", "b": "", "c": "x"},
            series={"s": {2020: "1"}, "empty": {}},
        )
        assert count_facts(entity) == 3

    def test_inbound_links_counted_from_context(self, make_entity) -> None:
        context = MetricContext(inbound_links={"python": ("numpy", "django")})
        assert count_inbound_links(make_entity("python"), context) == 2
        assert count_inbound_links(make_entity("ruby"), context) == 0
