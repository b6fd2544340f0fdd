from certintel.matching.classes import CLASS_FUZZY_THRESHOLD, find_training_class, score_title


def test_course_identifier_wins_before_title(catalog):
    match = find_training_class("Hazardous Materials Operations", catalog.list_active(), course_identifier="evoc-101")

    assert match.training_class.id == "c1"
    assert match.matched_on == "course_id"


def test_exact_title(catalog):
    match = find_training_class("emergency vehicle operations", catalog.list_active())
    assert match.training_class.id == "c1"
    assert match.score == 100


def test_partial_title_above_threshold(catalog):
    match = find_training_class("Hazardous Materials", catalog.list_active())
    assert match.training_class.id == "c2"
    assert match.score >= CLASS_FUZZY_THRESHOLD


def test_unrelated_title_is_not_matched(catalog):
    assert find_training_class("Swift Water Rescue", catalog.list_active()) is None


def test_score_title_containment_penalizes_length_gap():
    assert score_title("Firefighter I", "Firefighter I") == 100
    assert score_title("Firefighter", "Firefighter I") == 83
