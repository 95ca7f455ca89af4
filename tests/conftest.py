import copy
import os

os.environ.setdefault("ENVIRONMENT", "testing")

import pytest
from pymongo import DESCENDING

from resume_analyzer.models.settings import AppSettings, LLMSettings
from resume_analyzer.services.pipeline import ResumePipeline
from resume_analyzer.services.report_store import ReportStore


class FakeUpdateResult:
    def __init__(self, matched_count):
        self.matched_count = matched_count
        self.modified_count = matched_count


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, key, direction):
        self.docs = sorted(self.docs, key=lambda d: d[key], reverse=direction == DESCENDING)
        return self

    async def to_list(self, length=None):
        return [copy.deepcopy(d) for d in self.docs]


class FakeCollection:
    """Just enough of a motor collection for the report store"""

    def __init__(self):
        self.docs = []
        self.writes = 0

    @staticmethod
    def _match(doc, flt):
        return all(doc.get(k) == v for k, v in flt.items())

    async def insert_one(self, doc):
        self.writes += 1
        self.docs.append(copy.deepcopy(doc))

    async def update_one(self, flt, update):
        for doc in self.docs:
            if self._match(doc, flt):
                self.writes += 1
                doc.update(copy.deepcopy(update["$set"]))
                return FakeUpdateResult(1)
        return FakeUpdateResult(0)

    async def find_one(self, flt, projection=None):
        for doc in self.docs:
            if self._match(doc, flt):
                return copy.deepcopy(doc)
        return None

    def find(self, flt, projection=None):
        return FakeCursor([d for d in self.docs if self._match(d, flt)])


class FakeInvoker:
    """Stands in for ModelInvoker; replies come from a string, a callable or an exception"""

    def __init__(self, reply='{}', error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, system_prompt, user_content, response_format="json_object"):
        self.calls.append((system_prompt, user_content))
        if self.error is not None:
            raise self.error
        if callable(self.reply):
            return self.reply(system_prompt, user_content)
        return self.reply


def words(n):
    return " ".join(f"word{i}" for i in range(n))


@pytest.fixture
def settings():
    return AppSettings(llm=LLMSettings(api_key="test-key"))


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def store(collection):
    return ReportStore(collection)


@pytest.fixture
def invoker():
    return FakeInvoker()


@pytest.fixture
def pipeline(settings, invoker, store):
    return ResumePipeline(settings, invoker, store)
