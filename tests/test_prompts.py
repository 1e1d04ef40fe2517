import pytest

from aibird.prompts import bad_words_check, clean_prompt


def test_empty_and_blank_prompts_become_empty():
    assert clean_prompt("") == ""
    assert clean_prompt("   \t ") == ""


@pytest.mark.parametrize("phrase", ["jailbait", "Barely Legal", "TOO YOUNG", "age check"])
def test_banned_phrases_are_rejected(phrase):
    assert clean_prompt(f"a picture of {phrase} here") == ""


@pytest.mark.parametrize("message", ["spice girls on stage", "my girlfriend and boyfriend", "angel food cake"])
def test_exceptions_are_left_alone(message):
    assert clean_prompt(message) == message


def test_exception_result_is_trimmed_but_not_rewritten():
    assert clean_prompt("  girl power   rocks ") == "girl power   rocks"


def test_girl_is_replaced_with_woman():
    assert clean_prompt("girl") == "woman"


def test_boys_are_replaced_with_man():
    assert clean_prompt("boys") == "man"


def test_replacement_is_case_insensitive():
    result = clean_prompt("A GIRL in a field")
    assert "girl" not in result.lower()
    assert "woman" in result


@pytest.mark.parametrize("word", ["kid", "toddler", "teenager", "children"])
def test_youth_terms_are_removed(word):
    result = clean_prompt(f"a {word} in a park")
    assert word not in result.lower()
    assert "adult" in result


def test_young_ages_are_raised():
    result = clean_prompt("a person 15 years old")
    assert "15" not in result
    assert "25" in result


def test_larger_numbers_are_untouched():
    assert clean_prompt("a castle 300 years old") == "a castle 300 years old"


def test_word_boundaries_are_respected():
    assert clean_prompt("boyhood garden") == "boyhood garden"


def test_whitespace_is_normalised():
    result = clean_prompt("a   red\t\tcar")
    assert "  " not in result
    assert result == "a red car"


def test_cleaning_is_idempotent_on_clean_text():
    once = clean_prompt("a cat on a mat")
    assert clean_prompt(once) == once


def test_bad_words_check_matches_substring_ignoring_case():
    assert bad_words_check("Some NASTY text", ["nasty"]) is True
    assert bad_words_check("clean text", ["nasty", "vile"]) is False


def test_bad_words_check_empty_list():
    assert bad_words_check("anything", []) is False


def test_bad_words_check_mixed_case_word():
    assert bad_words_check("a vile thing", ["ViLe"]) is True