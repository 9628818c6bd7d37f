import re
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


def test_long_description_is_the_readme():
    text = (ROOT / "pyproject.toml").read_text()
    readme = re.search(r'^readme = "(.+)"$', text, re.M).group(1)
    assert readme == "README.md"
    assert "pip install" in (ROOT / readme).read_text()
