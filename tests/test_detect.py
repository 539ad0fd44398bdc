import logging
from pathlib import Path

import pytest
import yaml
from fastapi import FastAPI
from flask import Flask
from starlette.applications import Starlette
from starlette.responses import PlainTextResponse
from starlette.routing import Route

from api_documentor.analyzer.detect import FrameworkType, analyze_app, detect_framework

FIXTURES = Path(__file__).parent / "fixtures"


async def ping(request):
    return PlainTextResponse("pong")


@pytest.fixture
def petstore():
    return yaml.safe_load((FIXTURES / "petstore.yaml").read_text())


class TestDetectFramework:
    def test_openapi_document(self, petstore):
        assert detect_framework(petstore) is FrameworkType.OPENAPI
        assert detect_framework({"swagger": "2.0", "paths": {}}) is FrameworkType.OPENAPI

    def test_fastapi_before_starlette(self):
        assert detect_framework(FastAPI()) is FrameworkType.FASTAPI

    def test_starlette(self):
        assert detect_framework(Starlette(routes=[Route("/ping", ping)])) is FrameworkType.STARLETTE

    def test_flask(self):
        assert detect_framework(Flask(__name__)) is FrameworkType.FLASK

    def test_unknown_defaults_to_flask(self, caplog):
        with caplog.at_level(logging.WARNING, logger="api_documentor"):
            assert detect_framework(object()) is FrameworkType.FLASK
        assert "defaulting to flask" in caplog.text


class TestAnalyzeApp:
    def test_auto(self, petstore):
        assert len(analyze_app(petstore)) == 3

    def test_explicit_framework(self):
        endpoints = analyze_app(Starlette(routes=[Route("/ping", ping)]), "starlette")
        assert [ep.label for ep in endpoints] == ["GET /ping"]

    def test_unreadable_app_gives_empty_list(self, caplog):
        with caplog.at_level(logging.ERROR, logger="api_documentor"):
            assert analyze_app(object()) == []
        assert "Error analyzing flask app" in caplog.text

    def test_wrong_explicit_framework_gives_empty_list(self, petstore):
        assert analyze_app(petstore, FrameworkType.STARLETTE) == []

    def test_invalid_framework(self):
        with pytest.raises(ValueError):
            analyze_app({}, "django")
