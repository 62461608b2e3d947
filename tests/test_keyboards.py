from polynotifier.dialogues import MarketOption
from polynotifier.keyboards import (
    ELLIPSIS,
    MAX_LABEL_LEN,
    Button,
    alert_type_keyboard,
    confirm_keyboard,
    market_list_keyboard,
    outcome_keyboard,
    subscription_list_keyboard,
    truncate,
    unsubscribe_keyboard,
)


def test_truncate_keeps_short_labels():
    label = "a" * MAX_LABEL_LEN
    assert truncate(label) == label
    assert truncate("short") == "short"


def test_truncate_long_label():
    label = "b" * (MAX_LABEL_LEN + 5)
    result = truncate(label)
    assert len(result) == MAX_LABEL_LEN
    assert result.endswith(ELLIPSIS)
    assert label.startswith(result[:-1])


def test_truncate_counts_characters_not_bytes():
    label = "é" * MAX_LABEL_LEN
    assert truncate(label) == label


def test_market_list_keyboard():
    markets = [MarketOption("c0", "First?"), MarketOption("c1", "x" * 60)]
    kb = market_list_keyboard(markets)
    assert [row[0].data for row in kb] == ["market:0", "market:1"]
    assert kb[0][0].label == "First?"
    assert len(kb[1][0].label) == MAX_LABEL_LEN
    assert all(len(row) == 1 for row in kb)


def test_outcome_keyboard():
    kb = outcome_keyboard(["Yes", "No"])
    assert kb == [[Button("Yes", "outcome:0")], [Button("No", "outcome:1")]]


def test_alert_type_keyboard():
    kb = alert_type_keyboard()
    assert len(kb) == 1
    assert [b.data for b in kb[0]] == [
        "alert_type:above",
        "alert_type:below",
        "alert_type:cross",
    ]
    assert kb[0][0].label == "Above threshold"


def test_subscription_keyboards():
    subs = [(7, "Q? (outcome 0)"), (9, "y" * 50)]
    sub_kb = subscription_list_keyboard(subs)
    unsub_kb = unsubscribe_keyboard(subs)
    assert [row[0].data for row in sub_kb] == ["sub:7", "sub:9"]
    assert [row[0].data for row in unsub_kb] == ["unsub:7", "unsub:9"]
    assert sub_kb[0][0].label == "Q? (outcome 0)"
    assert sub_kb[1][0].label == unsub_kb[1][0].label == truncate("y" * 50)


def test_confirm_keyboard():
    kb = confirm_keyboard()
    assert kb == [[Button("Yes", "confirm:yes"), Button("No", "confirm:no")]]


def test_empty_inputs_give_empty_keyboards():
    assert market_list_keyboard([]) == []
    assert outcome_keyboard([]) == []
    assert unsubscribe_keyboard([]) == []