"""
LinguaLearn Test Suite

Test Structure:
    tests/
    ├── conftest.py                  # Shared fixtures and configuration
    └── unit/                        # Isolated tests, database and LLM mocked
        ├── test_answers.py          # Normalization, judging, scoring
        ├── test_scheduler.py        # SM-2 scheduling and due predicate
        ├── test_daily_goal.py       # Daily goal adaptation and streaks
        ├── test_*_service.py        # Service layer with a mocked session
        └── test_api_endpoints.py    # Routers via dependency overrides

Running Tests:
    # Run all tests
    pytest backend/tests -v

    # Run with coverage
    pytest backend/tests --cov=app --cov-report=html
"""
