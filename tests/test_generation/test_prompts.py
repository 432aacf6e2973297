"""Tests for the prompt-building strategies."""

from __future__ import annotations

import pytest

from websyncer.generation.prompts import BrandingPrompt, CampaignPrompt, resolve_aspect_ratio


def make_campaign() -> CampaignPrompt:
    return CampaignPrompt(
        person={
            "main_character": "Basketball Player",
            "action": "playing basketball",
            "clothing_color": "sporty colorful jerseys",
        },
        foreground={
            "custom_text": "JASON",
            "color": "Orange",
            "image_type": "Basketball",
            "measurement": "3D Scan",
        },
        background={
            "wall_text": "CHAMPION",
            "mood": "Energetic, Dynamic, Safe",
            "motivational_text": "Never Give Up",
            "slogan_location": "Wall",
            "slogan_language": "German",
            "slogan_product": "ultra personalized sport shoe soles",
        },
        branding={
            "logo_text": "ORTHOSCAN",
            "logo_text_color": "White",
            "logo_bg_color": "Black",
            "logo_border_color": "Skyblue",
            "instagram_contact": "instagram.com/orthoscan_insoles",
        },
    )


class TestCampaignPrompt:
    def test_substitutes_fields(self):
        prompt = make_campaign().build()
        assert "Scene: Basketball Player wearing sporty colorful jerseys, playing basketball." in prompt
        assert "personalised INSOLE (JASON, Orange, image - for instance Basketball" in prompt
        assert "Text on Wall in German emphasizing CHAMPION" in prompt
        assert "Mood: Energetic, Dynamic, Safe" in prompt
        assert '"ORTHOSCAN" (in one line the text, White bold text on Black rounded rectangle' in prompt
        assert '"Instagram: instagram.com/orthoscan_insoles"' in prompt

    def test_prompt_is_trimmed(self):
        prompt = make_campaign().build()
        assert prompt == prompt.strip()
        assert prompt.startswith("Ultra Professional fitness shoe INSOLE photography")

    def test_always_square(self):
        assert make_campaign().aspect_ratio() == "1:1"

    def test_missing_field_raises(self):
        campaign = make_campaign()
        broken = CampaignPrompt(
            person={"main_character": "Runner"},
            foreground=campaign.foreground,
            background=campaign.background,
            branding=campaign.branding,
        )
        with pytest.raises(KeyError):
            broken.build()


class TestBrandingPrompt:
    def test_passes_prompt_through(self):
        assert BrandingPrompt(prompt="a red sneaker on white").build() == "a red sneaker on white"

    @pytest.mark.parametrize("ratio", ["1:1", "3:4", "4:3", "9:16", "16:9"])
    def test_supported_ratio_kept(self, ratio):
        assert BrandingPrompt(prompt="p", requested_aspect_ratio=ratio).aspect_ratio() == ratio

    @pytest.mark.parametrize("ratio", ["2:1", "", None, "16:10"])
    def test_unsupported_ratio_falls_back_to_square(self, ratio):
        assert BrandingPrompt(prompt="p", requested_aspect_ratio=ratio).aspect_ratio() == "1:1"

    def test_negative_prompt_not_in_prompt(self):
        strategy = BrandingPrompt(prompt="p", negative_prompt="blurry")
        assert "blurry" not in strategy.build()


def test_resolve_aspect_ratio_custom_list():
    assert resolve_aspect_ratio("2:1", supported=("2:1",)) == "2:1"
    assert resolve_aspect_ratio("1:1", supported=("2:1",), default="2:1") == "2:1"
