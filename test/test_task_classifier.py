from classification.task_classifier import DEFAULT_CATEGORY, TaskClassifier

def test_keyword_match():
    c = TaskClassifier()
    out = c.classify("Buy groceries for the week")
    assert out.value == "errands"
    assert out.confidence == "medium"
    assert "buy" in out.rationale

def test_word_boundaries():
    # "run" must not match inside "brunch"
    out = TaskClassifier().classify("Brunch menu draft")
    assert out.value == DEFAULT_CATEGORY
    assert out.confidence == "low"

def test_custom_keywords():
    c = TaskClassifier(keywords={"garden": ("water", "plants")})
    assert c.classify("Water the plants").value == "garden"
