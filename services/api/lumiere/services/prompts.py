from __future__ import annotations

from typing import Any

ANALYZE_PROMPT = """Analyze this clothing item and provide:
1. Detailed attributes (color, pattern, style, category).
2. If a person is visible, analyze their hair (style, color, length).
3. 3-4 matching outfit recommendations (e.g., if it's a shirt, suggest pants, shoes, and an accessory).

CRITICAL: For each recommendation, you MUST provide a REAL, VALID purchase link.
Use Google Search to find current products on Myntra, Amazon.in, Ajio, or Flipkart.

If you cannot find a direct product page link, CONSTRUCT a valid search URL using these templates:
- Ajio: https://www.ajio.com/search/?text=[ITEM_NAME_AND_COLOR]
- Myntra: https://www.myntra.com/search?q=[ITEM_NAME_AND_COLOR]
- Amazon: https://www.amazon.in/s?k=[ITEM_NAME_AND_COLOR]
- Flipkart: https://www.flipkart.com/search?q=[ITEM_NAME_AND_COLOR]

Replace [ITEM_NAME_AND_COLOR] with the suggested item's name and color.

Provide a realistic item name, the platform, a price range in INR, and a match score (0-100).
Also provide a reason why it matches."""

STYLIST_SYSTEM_INSTRUCTION = """You are LUMIÈRE, a high-end luxury fashion stylist.
Your tone is warm, sophisticated, and encouraging.

CRITICAL: You MUST analyze any image provided by the user.
Identify the clothing items, colors, patterns, textures, and the user's physical features (like hair and face shape) to provide highly personalized styling advice.
If an image is present, your response should be directly based on what you see in that image.

Always provide a comprehensive styling breakdown for every request:
1. Provide a 'friendlyResponse' using Markdown. Use bold text for key items and bullet points for clarity.
   Structure it strictly like:
   - **The Vision**: (overall vibe based on the image)
   - **The Components**: (Top, Bottom, Shoes, Accessories)
   - **The Hairstyle**: Analyze the user's hair in the provided image (length, texture, color) and suggest a hairstyle that complements their face shape and the outfit. If no image is provided, suggest a versatile look.
   - **Stylist Tip**: (pro advice)
2. Provide a 'visualPrompt': A VERY DETAILED, descriptive prompt for an image generation model of the COMPLETE OUTFIT. Include lighting, fabric textures, and setting.
3. Provide a 'hairVisualPrompt': A VERY DETAILED, descriptive prompt for an image generation model focusing ONLY on the HAIRSTYLE (close-up). It MUST be inspired by or a refined version of the user's actual hair seen in the photo (if provided). Include hair texture, color, and lighting.
4. Provide 'recommendations': A list of 2-3 specific items that would complete this look, including real-world platforms (Ajio, Myntra, Amazon.in)."""

DEFAULT_CHAT_MESSAGE = "Analyze this image and give me styling advice."
EMPTY_NARRATIVE_FALLBACK = "Here is a visual representation of the styling idea."

QUOTA_APOLOGY = (
    "I'm sorry, but I've reached my daily styling limit. Please try again in a little while, "
    "and I'll be happy to help you with your fashion needs!"
)
QUOTA_DISCLAIMER = (
    "\n\n*(Note: I've reached my visual generation limit for the moment, so I've provided "
    "high-quality style references instead. I'll be back to full creative power shortly!)*"
)


def product_photo_prompt(name: str, category: str) -> str:
    return (
        f"A high-end, professional fashion product photograph of {name} ({category}). "
        "Minimalist luxury studio background, soft lighting, high fashion aesthetic, 8k resolution."
    )


def outfit_scene_prompt(visual_prompt: str) -> str:
    return (
        f"A high-end, professional fashion editorial photograph of a complete outfit: {visual_prompt}. "
        "Minimalist luxury studio, 8k, highly detailed."
    )


def hair_scene_prompt(hair_prompt: str) -> str:
    return (
        f"A high-end, professional beauty photography close-up of a hairstyle: {hair_prompt}. "
        "Minimalist luxury studio, soft lighting, 8k, highly detailed."
    )


def _string(description: str | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "STRING"}
    if description:
        schema["description"] = description
    return schema


_RECOMMENDATION_FIELDS = ["name", "category", "reason", "platform", "priceRange", "purchaseUrl"]

ANALYSIS_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "analysis": {
            "type": "OBJECT",
            "properties": {
                "color": _string(),
                "pattern": _string(),
                "style": _string(),
                "category": _string(),
                "description": _string(),
                "hairStyle": _string("The user's hairstyle if visible"),
                "hairColor": _string("The user's hair color if visible"),
            },
            "required": ["color", "pattern", "style", "category", "description"],
        },
        "recommendations": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    **{key: _string() for key in _RECOMMENDATION_FIELDS},
                    "imageUrl": _string(),
                    "matchScore": {"type": "NUMBER"},
                },
                "required": [*_RECOMMENDATION_FIELDS, "imageUrl", "matchScore"],
            },
        },
    },
    "required": ["analysis", "recommendations"],
}

STYLIST_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "friendlyResponse": _string(),
        "visualPrompt": _string(),
        "hairVisualPrompt": _string(),
        "recommendations": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {key: _string() for key in _RECOMMENDATION_FIELDS},
                "required": list(_RECOMMENDATION_FIELDS),
            },
        },
    },
    "required": ["friendlyResponse", "visualPrompt", "hairVisualPrompt", "recommendations"],
}
