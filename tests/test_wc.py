from collections import Counter

from tourkit.wc import TEST_CASES, check


def _word_count(s):
    return dict(Counter(s.split()))


def test_correct_function_passes(capsys):
    assert check(_word_count) is True
    out = capsys.readouterr().out
    assert out.count("PASS\n") == len(TEST_CASES)
    assert "FAIL" not in out


def test_pass_report_format(capsys):
    check(_word_count)
    out = capsys.readouterr().out
    first = out.split("PASS\n")[1]
    assert first == (
        ' f("I am learning Go!") = \n'
        '  map[string]int{"Go!":1, "I":1, "am":1, "learning":1}\n'
    )


def test_wrong_function_fails_with_report(capsys):
    assert check(lambda s: {"x": 1}) is False
    out = capsys.readouterr().out
    assert out == (
        'FAIL\n f("I am learning Go!") =\n  map[string]int{"x":1}\n'
        ' want:\n  map[string]int{"Go!":1, "I":1, "am":1, "learning":1}'
    )


def test_stops_at_first_failure(capsys):
    def flaky(s):
        counts = _word_count(s)
        if s.startswith("The"):
            counts["extra"] = 1
        return counts

    assert check(flaky) is False
    out = capsys.readouterr().out
    assert out.count("PASS\n") == 1
    assert out.count("FAIL\n") == 1
    assert "Then" not in out


def test_missing_key_counts_as_failure(capsys):
    def swapped(s):
        counts = _word_count(s)
        key = next(iter(counts))
        counts[key + "?"] = counts.pop(key)
        return counts

    assert check(swapped) is False
    assert capsys.readouterr().out.startswith("FAIL\n")