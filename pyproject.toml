[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lica"
version = "0.1.0"
description = "Per-user shopping lists with products and categories, SQL storage, schema migrations, Google sign-in and HTMX page handlers."
requires-python = ">=3.10"
keywords = ["shopping list", "htmx", "oauth2", "sqlalchemy", "migrations", "werkzeug"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    "Topic :: Office/Business",
]
dependencies = [
    "sqlalchemy>=2.0",
    "python-dotenv>=1.0",
    "requests>=2.31",
    "werkzeug>=3.0",
    "jinja2>=3.1",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
]

[project.scripts]
lica = "lica.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["lica"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
