"""
AI text-generation providers.

Each provider exposes ``name`` and ``generate(prompt) -> str`` and raises
ProviderError on any failure. Providers are built once and handed to the
ContentOrchestrator in priority order.
"""
import logging
from typing import List, Optional, Protocol, Sequence

import google.generativeai as genai
import requests
from openai import OpenAI

import config
from errors import ProviderError

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are an expert educational assistant that creates concise, engaging study materials. "
    "Always respond with valid JSON only, no additional text."
)


class Provider(Protocol):
    name: str

    def generate(self, prompt: str) -> str:
        ...


class HuggingFaceProvider:
    name = "huggingface"

    def __init__(
        self,
        api_key: str,
        models: Sequence[str] = tuple(config.HUGGINGFACE_MODELS),
        api_url: str = config.HUGGINGFACE_API_URL,
        timeout: float = config.AI_TIMEOUT_SECONDS,
    ) -> None:
        if not api_key:
            raise ValueError("HuggingFace provider requires an API key")
        self.api_key = api_key
        self.models = list(models)
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    def _try_model(self, model: str, prompt: str) -> str:
        resp = requests.post(
            f"{self.api_url}/{model}",
            headers={"Authorization": f"Bearer {self.api_key}"},
            json={
                "inputs": f"You are an expert educational assistant. {prompt}",
                "parameters": {"max_new_tokens": 500, "temperature": 0.7, "return_full_text": False},
            },
            timeout=self.timeout,
        )
        resp.raise_for_status()
        data = resp.json()
        if isinstance(data, list) and data:
            data = data[0]
        text = (data.get("generated_text") or "").strip() if isinstance(data, dict) else ""
        if not text:
            raise ProviderError(f"{model} returned no generated_text")
        return text

    def generate(self, prompt: str) -> str:
        last_error = "no models configured"
        for model in self.models:
            try:
                text = self._try_model(model, prompt)
                logger.info("Using HuggingFace model %s", model)
                return text
            except (requests.RequestException, ValueError, ProviderError) as e:
                last_error = f"{model}: {type(e).__name__}: {e}"
        raise ProviderError(f"HuggingFace models not available ({last_error})")


class GeminiProvider:
    name = "gemini"

    PREFERENCES = ("gemini-2.0-flash", "gemini-1.5-flash", "gemini-1.5-flash-8b")

    def __init__(self, api_key: str, model: str = config.GEMINI_MODEL, timeout: float = config.AI_TIMEOUT_SECONDS) -> None:
        if not api_key:
            raise ValueError("Gemini provider requires an API key")
        genai.configure(api_key=api_key)
        self.desired_model = model
        self.timeout = timeout
        self._model_name: Optional[str] = None

    def _pick_model(self) -> str:
        """
        Pick a model that supports generateContent on this key.
        GEMINI_MODEL wins when available, then the PREFERENCES list, then any 'flash' model.
        """
        models = list(genai.list_models())
        names = [m.name for m in models if "generateContent" in getattr(m, "supported_generation_methods", [])]
        if not names:
            raise ProviderError("No Gemini models with generateContent are available to this API key.")
        simple = [n.split("/")[-1] for n in names]

        desired = self.desired_model
        if desired:
            if desired in simple:
                return f"models/{desired}"
            if desired.startswith("models/") and desired.split("/")[-1] in simple:
                return desired

        for p in self.PREFERENCES:
            if p in simple:
                return f"models/{p}"
        for s in simple:
            if "flash" in s:
                return f"models/{s}"
        return names[0]

    def generate(self, prompt: str) -> str:
        try:
            if self._model_name is None:
                self._model_name = self._pick_model()
            model = genai.GenerativeModel(self._model_name)
            resp = model.generate_content(prompt, request_options={"timeout": self.timeout})
            text = (getattr(resp, "text", "") or "").strip()
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(f"Gemini request failed: {type(e).__name__}: {e}") from e
        if not text:
            raise ProviderError("Empty Gemini response")
        return text


class OpenAIProvider:
    name = "openai"

    def __init__(self, api_key: str, model: str = config.OPENAI_MODEL, timeout: float = config.AI_TIMEOUT_SECONDS) -> None:
        if not api_key:
            raise ValueError("OpenAI provider requires an API key")
        self.client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model

    def generate(self, prompt: str) -> str:
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_INSTRUCTION},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.7,
                max_tokens=1000,
            )
            text = (completion.choices[0].message.content or "").strip()
        except Exception as e:
            raise ProviderError(f"OpenAI request failed: {type(e).__name__}: {e}") from e
        if not text:
            raise ProviderError("Empty OpenAI response")
        return text


_FACTORIES = {
    "huggingface": lambda: HuggingFaceProvider(config.HUGGINGFACE_API_KEY) if config.HUGGINGFACE_API_KEY else None,
    "gemini": lambda: GeminiProvider(config.GEMINI_API_KEY) if config.GEMINI_API_KEY else None,
    "openai": lambda: OpenAIProvider(config.OPENAI_API_KEY) if config.OPENAI_API_KEY else None,
}


def build_providers(order: Sequence[str] = tuple(config.AI_PROVIDER_ORDER)) -> List[Provider]:
    """Construct every configured provider, in priority order."""
    providers: List[Provider] = []
    for name in order:
        factory = _FACTORIES.get(name.lower())
        if factory is None:
            logger.warning("Unknown AI provider %r in AI_PROVIDER_ORDER; ignoring", name)
            continue
        provider = factory()
        if provider is None:
            logger.info("AI provider %s not configured (missing API key)", name)
            continue
        providers.append(provider)
    logger.info("AI providers in priority order: %s", [p.name for p in providers] or "none")
    return providers
