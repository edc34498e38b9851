"""Shared fixtures: a fresh SQLite store per test."""

from datetime import date

import pytest
from sqlalchemy import create_engine

from expenses.services import ExpenseCommands
from expenses.storage import ExpenseStorage

TODAY = date(2024, 3, 15)


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'expenses.db'}"


@pytest.fixture
def storage(database_url):
    store = ExpenseStorage(create_engine(database_url))
    store.ensure_schema()
    yield store
    store.close()


class FakePrompt:
    """Records prompts and replays a canned answer."""

    def __init__(self, answer):
        self.answer = answer
        self.prompts = []

    def __call__(self, message):
        self.prompts.append(message)
        return self.answer


@pytest.fixture
def make_commands(storage):
    def _make(answer="n"):
        prompt = FakePrompt(answer)
        return ExpenseCommands(storage, prompt=prompt, today=lambda: TODAY), prompt

    return _make


@pytest.fixture
def commands(make_commands):
    return make_commands()[0]
