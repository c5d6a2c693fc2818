"""Tests for article quality scoring."""

import pytest

from sitefactory.quality.criteria import Criterion, combine_scores, evaluate_criteria, get_grade
from sitefactory.quality.scorer import OVERALL_WEIGHTS, QualityScorer, heading_structure_score
from sitefactory.types import Article


class TestGrades:
    @pytest.mark.parametrize(
        "score,grade",
        [
            (95, "A+"),
            (90, "A+"),
            (85, "A"),
            (75, "B"),
            (65, "C"),
            (55, "D"),
            (50, "D"),
            (45, "F"),
            (0, "F"),
        ],
    )
    def test_grade_boundaries(self, score, grade):
        assert get_grade(score) == grade


class TestCriteria:
    def test_partial_credit(self):
        criteria = [
            Criterion(item="half", points=10, check=lambda s: 0.5, message="more please"),
            Criterion(item="full", points=20, check=lambda s: True),
        ]
        total, results = evaluate_criteria("x", criteria)
        assert total == 25
        assert results[0].status == "needs improvement"
        assert results[0].message == "more please"
        assert results[1].passed
        assert results[1].message is None

    def test_good_threshold(self):
        criteria = [Criterion(item="h", points=10, check=lambda s: 0.5, good_threshold=0.5)]
        _, results = evaluate_criteria("x", criteria)
        assert results[0].passed

    def test_combine_scores(self):
        assert combine_scores({"a": 100, "b": 50}, {"a": 0.5, "b": 0.5, "c": 1.0}) == 75


class TestQualityScorer:
    def test_scores_are_in_range(self, sample_article):
        report = QualityScorer().score(sample_article)
        for value in report.scores.model_dump().values():
            assert 0 <= value <= 100
        assert report.grade == get_grade(report.scores.overall)

    def test_overall_is_weighted_sum(self, sample_article):
        scores = QualityScorer().score(sample_article).scores
        expected = sum(getattr(scores, name) * weight for name, weight in OVERALL_WEIGHTS.items())
        assert scores.overall == pytest.approx(expected)

    def test_idempotent(self, sample_article):
        scorer = QualityScorer()
        assert scorer.score(sample_article) == scorer.score(sample_article)

    def test_structure_and_engagement(self, sample_article):
        scores = QualityScorer().score(sample_article).scores
        assert scores.structure == 100
        assert scores.engagement == 100

    def test_seo_without_and_with_image(self, sample_article):
        scorer = QualityScorer()
        assert scorer.score(sample_article).scores.seo == 60
        sample_article.image = "/images/header.jpg"
        assert scorer.score(sample_article).scores.seo == 80

    @pytest.mark.parametrize("length,passed", [(29, False), (30, True), (60, True), (61, False)])
    def test_title_length_bounds(self, length, passed):
        article = Article(title="x" * length, content="<p>c</p>")
        check = QualityScorer().score(article).seo_checks[0]
        assert check.item == "Title length"
        assert check.passed is passed

    def test_recommendations_for_weak_article(self):
        report = QualityScorer().score(Article(title="Hi", content="<p>x</p>"))
        assert "Title should be 30-60 characters (current: 2)" in report.recommendations
        assert "Add a featured image" in report.recommendations
        assert any(r.startswith("Improve structure") for r in report.recommendations)
        assert any(r.startswith("Improve engagement") for r in report.recommendations)

    def test_heading_structure_score(self):
        assert heading_structure_score("<h1>a</h1><h2>b</h2>") == pytest.approx(0.8)
        assert heading_structure_score("<h1>a</h1><h2>b</h2><h3>c</h3>") == pytest.approx(1.0)
        assert heading_structure_score("<p>none</p>") == 0.0
