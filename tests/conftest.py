"""Shared collaborator doubles.

``FakeTextClient`` answers according to the kind of prompt it receives and
records every call, so tests can assert how many paid calls were made.
"""

import asyncio
import json

import pytest

PROFILE_ANSWER = {
    "productName": "Curso de Marketing",
    "targetAudience": "Pequenos empreendedores",
    "mainPain": "Falta de tempo para divulgar o negócio",
    "mainBenefit": "economize tempo",
    "centralPromise": "Anúncios prontos em minutos",
    "communicationTone": "Profissional",
    "niche": "Educação",
}

MANUAL_ANSWER = """HEADLINE:
Transforme sua gestão em 30 dias

TEXTO DO ANÚNCIO:
Cansado de perder tempo com planilhas? Nosso software automatiza tudo.
Pequenos empresários já economizam 10 horas por semana.

CTA:
Comece seu teste grátis

ÂNGULO EMOCIONAL:
Alívio e eficiência

IDEIA DE CRIATIVO:
Vídeo mostrando antes e depois de um empresário usando o software"""


def classify_prompt(messages, json_schema=None) -> str:
    prompt = messages[-1]["content"]
    if json_schema is not None:
        return "analysis"
    if "Entregue EXATAMENTE" in prompt:
        return "manual"
    if "diretor de arte" in prompt:
        return "briefing"
    for asset in ("headline", "anúncio", "cta"):
        if f"TIPO DE COPY: {asset}\n" in prompt:
            return {"anúncio": "body"}.get(asset, asset)
    return "unknown"


class FakeTextClient:
    def __init__(self, analysis=None, answers=None, failures=None, delay: float = 0.0):
        self.analysis = dict(PROFILE_ANSWER if analysis is None else analysis)
        self.answers = {
            "headline": "Marketing sem perder tempo",
            "body": "Aprenda a criar anúncios que vendem. " * 10,
            "cta": "Quero minha vaga",
            "briefing": "Empreendedor sorrindo diante do notebook, luz natural, estilo premium",
            "manual": MANUAL_ANSWER,
        }
        self.answers.update(answers or {})
        self.failures = failures or {}
        self.delay = delay
        self.calls = []
        self.cancelled = []

    def count(self, kind: str) -> int:
        return sum(1 for call in self.calls if call["kind"] == kind)

    async def complete(self, messages, *, json_schema=None):
        kind = classify_prompt(messages, json_schema)
        self.calls.append({"kind": kind, "messages": messages, "json_schema": json_schema})
        try:
            if self.delay and kind not in self.failures:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled.append(kind)
            raise
        if kind in self.failures:
            raise self.failures[kind]
        if kind == "analysis":
            return json.dumps(self.analysis, ensure_ascii=False)
        return self.answers[kind]


class FakeImageClient:
    def __init__(self, url: str = "https://images.example.com/ad.png", error=None):
        self.url = url
        self.error = error
        self.prompts = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.url


class FakePdfConverter:
    def __init__(self, text: str = "", error=None):
        self.text = text
        self.error = error
        self.calls = 0

    async def convert(self, pdf_bytes: bytes) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def text_client():
    return FakeTextClient()


@pytest.fixture
def image_client():
    return FakeImageClient()


@pytest.fixture
def pdf_converter():
    return FakePdfConverter()
