import pytest
from broresolve.constants.tickets import Category, Priority, Mood
from broresolve.services.classifier import classify


@pytest.mark.parametrize('text,expected', [
    ('WiFi down in hostel', (Category.INFRASTRUCTURE, Priority.HIGH)),
    ('Lab PCs will not boot', (Category.INFRASTRUCTURE, Priority.HIGH)),
    ('Need lecture notes', (Category.ACADEMIC, Priority.MEDIUM)),
    ('Where are the NOTES for unit 3', (Category.ACADEMIC, Priority.MEDIUM)),
    ('I need counseling', (Category.MENTAL_HEALTH, Priority.HIGH)),
    ('mental health support hours?', (Category.MENTAL_HEALTH, Priority.HIGH)),
    ('Canteen food is cold', (Category.OTHER, Priority.MEDIUM)),
])
def test_keyword_rules(text, expected):
    assert classify(text) == expected


def test_substring_not_word_match():
    # "teacher" contains "ac"
    assert classify('teacher was late again') == (Category.INFRASTRUCTURE, Priority.HIGH)


def test_first_rule_wins():
    # mentions both lab and lecture; infrastructure rule is checked first
    assert classify('lecture hall lab projector') == (Category.INFRASTRUCTURE, Priority.HIGH)


def test_panicking_overrides_priority():
    assert classify('Canteen food is cold', Mood.PANICKING) == (Category.OTHER, Priority.CRITICAL)
    assert classify('Need lecture notes', 'panicking') == (Category.ACADEMIC, Priority.CRITICAL)


@pytest.mark.parametrize('mood', [None, Mood.NEUTRAL, Mood.FRUSTRATED, Mood.SICK])
def test_other_moods_keep_rule_priority(mood):
    assert classify('Need lecture notes', mood) == (Category.ACADEMIC, Priority.MEDIUM)


def test_deterministic():
    assert classify('wifi is slow') == classify('wifi is slow')


@pytest.mark.parametrize('text,mood,expected', [
    ('Need counseling ASAP', 'panicking', (Category.MENTAL_HEALTH, Priority.CRITICAL)),
    ('random thing', 'neutral', (Category.OTHER, Priority.MEDIUM)),
    ('WiFi down in hostel', 'panicking', (Category.INFRASTRUCTURE, Priority.CRITICAL)),
])
def test_literal_examples(text, mood, expected):
    assert classify(text, mood) == expected
