"""
Unit Tests for the physical assessment calculators.
"""

import pytest

from fitcoach.utils.assessment_calculations import (
    calculate_bmi,
    get_bmi_classification,
    calculate_body_fat_navy,
    get_body_fat_classification,
    calculate_rcq,
    get_rcq_classification,
    calculate_ideal_weight,
    IdealWeight,
    calculate_body_composition,
    compute_assessment_metrics,
    describe_metrics,
)


class TestBmi:

    def test_reference_value(self):
        assert calculate_bmi(70, 175) == 22.86

    @pytest.mark.parametrize('weight,height', [(0, 175), (70, 0), (None, 175), (70, None)])
    def test_missing_input_returns_zero(self, weight, height):
        assert calculate_bmi(weight, height) == 0

    @pytest.mark.parametrize('bmi,label', [
        (17.0, 'Underweight'),
        (18.5, 'Normal weight'),
        (24.89, 'Normal weight'),
        (24.9, 'Overweight'),
        (30.0, 'Obesity class I'),
        (35.0, 'Obesity class II'),
        (39.9, 'Obesity class III'),
    ])
    def test_classification_tiers(self, bmi, label):
        assert get_bmi_classification(bmi).label == label


class TestBodyFatNavy:

    def test_male_formula_returns_number(self):
        body_fat = calculate_body_fat_navy('M', 175, 90, 38)
        assert isinstance(body_fat, float)
        assert 20 < body_fat < 35

    def test_female_without_hip_is_none(self):
        assert calculate_body_fat_navy('F', 165, 80, 34) is None

    def test_female_with_hip_returns_number(self):
        body_fat = calculate_body_fat_navy('F', 165, 80, 34, 100)
        assert isinstance(body_fat, float)

    def test_missing_measurements_are_none(self):
        assert calculate_body_fat_navy('M', None, 90, 38) is None
        assert calculate_body_fat_navy('M', 175, None, 38) is None
        assert calculate_body_fat_navy('M', 175, 90, None) is None

    def test_non_positive_girth_is_none(self):
        assert calculate_body_fat_navy('M', 175, 38, 40) is None

    def test_rounded_to_two_decimals(self):
        body_fat = calculate_body_fat_navy('M', 180, 85, 40)
        assert body_fat == round(body_fat, 2)

    def test_classification_depends_on_gender(self):
        assert get_body_fat_classification(12, 'F').label == 'Athlete'
        assert get_body_fat_classification(12, 'M').label == 'Fitness'
        assert get_body_fat_classification(30, 'M').label == 'Obese'


class TestWaistHipRatio:

    def test_reference_value(self):
        assert calculate_rcq(80, 100) == 0.8

    def test_missing_input_returns_zero(self):
        assert calculate_rcq(None, 100) == 0
        assert calculate_rcq(80, 0) == 0

    def test_classification(self):
        assert get_rcq_classification(0.85, 'M').label == 'Low risk'
        assert get_rcq_classification(0.85, 'F').label == 'High risk'
        assert get_rcq_classification(0.95, 'M').label == 'Moderate risk'


class TestIdealWeight:

    def test_range_is_ten_percent_around_ideal(self):
        result = calculate_ideal_weight(175, 'M')

        assert result.min < result.ideal < result.max
        assert result == IdealWeight(min=62.0, ideal=68.9, max=75.8)

    def test_robinson_male(self):
        assert calculate_ideal_weight(175, 'M').ideal == 68.9

    def test_female_is_lighter(self):
        assert calculate_ideal_weight(170, 'F').ideal < calculate_ideal_weight(170, 'M').ideal

    def test_short_height_falls_back_to_bmi_22(self):
        assert calculate_ideal_weight(150, 'F').ideal == round(22 * 1.5 * 1.5, 1)

    def test_base_height_uses_robinson(self):
        result = calculate_ideal_weight(152.4, 'M')

        assert result.ideal == 52.0
        assert result.min == 46.8
        assert result.max == 57.2

    def test_range_comes_from_unrounded_ideal(self):
        # ideal is 50.138 before rounding; 50.1 * 1.1 would give 55.1
        assert calculate_ideal_weight(154.1, 'F') == IdealWeight(min=45.1, ideal=50.1, max=55.2)


class TestComposite:

    def test_body_composition(self):
        assert calculate_body_composition(80, 25) == (60.0, 20.0)
        assert calculate_body_composition(80, None) == (None, None)

    def test_metrics_warn_when_female_hip_missing(self):
        metrics = compute_assessment_metrics('F', 62, 165, waist_cm=80, neck_cm=34)

        assert metrics['bmi'] == calculate_bmi(62, 165)
        assert metrics['body_fat_percentage'] is None
        assert metrics['lean_mass_kg'] is None
        assert any('hip' in warning for warning in metrics['warnings'])

    def test_metrics_complete_for_male(self):
        metrics = compute_assessment_metrics('M', 80, 180, waist_cm=85, neck_cm=40, hip_cm=100)

        assert metrics['body_fat_percentage'] is not None
        assert metrics['waist_hip_ratio'] == 0.85
        assert metrics['lean_mass_kg'] + metrics['fat_mass_kg'] == pytest.approx(80, abs=0.02)
        assert metrics['warnings'] == []

    def test_describe_metrics_skips_missing_values(self):
        described = describe_metrics('M', None, None, None, None)
        assert described == {
            'bmi_classification': None,
            'body_fat_classification': None,
            'rcq_classification': None,
            'ideal_weight': None,
        }
