"""Tests for CopyGenerator and BriefingGenerator."""

import asyncio

import pytest
from conftest import FakeTextClient

from app.errors import CollaboratorFailure, InsufficientAnalysis
from app.models.creative import AssetType
from app.models.profile import NOT_IDENTIFIED, ProductProfile
from app.services.briefing import BriefingGenerator
from app.services.copywriter import CopyGenerator

_PROFILE = ProductProfile(
    product_name="Curso de Marketing",
    target_audience="Pequenos empreendedores",
    main_benefit="economize tempo",
    communication_tone="Profissional",
    niche="Educação",
)


class TestGenerateCopy:
    @pytest.mark.parametrize(
        "asset_type, guidance",
        [
            (AssetType.HEADLINE, "máximo 40 caracteres"),
            (AssetType.BODY, "100-150 palavras"),
            (AssetType.CTA, "máximo 20 caracteres"),
        ],
    )
    def test_prompt_carries_profile_and_length_guidance(self, asset_type, guidance):
        client = FakeTextClient()
        asyncio.run(CopyGenerator(client).generate_copy(_PROFILE, asset_type, "Leads"))
        prompt = client.calls[0]["messages"][-1]["content"]
        assert guidance in prompt
        assert "Curso de Marketing" in prompt
        assert "OBJETIVO: Leads" in prompt
        # unresolved fields are rendered, not dropped
        assert f"Dor principal: {NOT_IDENTIFIED}" in prompt

    def test_response_trimmed_not_truncated(self):
        long_headline = "Uma headline bem mais longa do que quarenta caracteres permitidos"
        client = FakeTextClient(answers={"headline": f"  {long_headline}\n"})
        text = asyncio.run(CopyGenerator(client).generate_copy(_PROFILE, AssetType.HEADLINE, "Vendas"))
        assert text == long_headline

    def test_unusable_profile_never_calls_collaborator(self):
        client = FakeTextClient()
        profile = ProductProfile(main_benefit="economize tempo")
        with pytest.raises(InsufficientAnalysis):
            asyncio.run(CopyGenerator(client).generate_copy(profile, AssetType.CTA, "Vendas"))
        assert client.calls == []

    def test_blank_answer(self):
        client = FakeTextClient(answers={"cta": "   "})
        with pytest.raises(CollaboratorFailure):
            asyncio.run(CopyGenerator(client).generate_copy(_PROFILE, AssetType.CTA, "Vendas"))


class TestGenerateAll:
    def test_three_calls_one_per_asset(self):
        client = FakeTextClient()
        assets = asyncio.run(CopyGenerator(client).generate_all(_PROFILE, "Vendas"))
        assert assets.headline and assets.body and assets.cta
        assert sorted(call["kind"] for call in client.calls) == ["body", "cta", "headline"]

    def test_calls_run_concurrently(self):
        client = FakeTextClient(delay=0.2)

        async def timed():
            loop = asyncio.get_running_loop()
            start = loop.time()
            await CopyGenerator(client).generate_all(_PROFILE, "Vendas")
            return loop.time() - start

        assert asyncio.run(timed()) < 0.5

    def test_one_failure_fails_everything(self):
        client = FakeTextClient(
            failures={"body": CollaboratorFailure("Erro ao gerar copy.")}, delay=0.2
        )
        with pytest.raises(CollaboratorFailure):
            asyncio.run(CopyGenerator(client).generate_all(_PROFILE, "Vendas"))
        # the still-running siblings were cancelled, not left to finish
        assert sorted(client.cancelled) == ["cta", "headline"]


class TestBriefing:
    def test_briefing_prompt_and_result(self):
        client = FakeTextClient(answers={"briefing": "  Foto premium de notebook  "})
        briefing = asyncio.run(BriefingGenerator(client).generate_briefing(_PROFILE))
        assert briefing == "Foto premium de notebook"
        prompt = client.calls[0]["messages"][-1]["content"]
        assert "Máximo 200 caracteres" in prompt
        assert "Nicho: Educação" in prompt

    def test_long_briefing_kept_whole(self):
        client = FakeTextClient(answers={"briefing": "x" * 260})
        assert len(asyncio.run(BriefingGenerator(client).generate_briefing(_PROFILE))) == 260

    def test_empty_briefing(self):
        client = FakeTextClient(answers={"briefing": ""})
        with pytest.raises(CollaboratorFailure):
            asyncio.run(BriefingGenerator(client).generate_briefing(_PROFILE))
