"""Unit tests for the chat and speech clients."""
import base64
from types import SimpleNamespace

import pytest
from google.genai import types
from hypothesis import given
from hypothesis import strategies as st

from sofia.llm import (
    AttachedFile,
    ChatAnswer,
    ChatClient,
    ChatFallback,
    GeminiChatClient,
    GeminiSpeechClient,
    Language,
    SpeechClient,
    create_chat_client,
    create_speech_client,
)
from sofia.llm.providers.gemini import ERROR_TEXT, NO_RESPONSE_TEXT, build_parts, extract_sources
from sofia.prompts import PROMPTS_DIR_ENV, clear_cache, get_system_instruction, load_prompt


class TestClientInterfaces:
    """Tests for the abstract client interfaces."""

    def test_chat_client_is_abstract(self):
        with pytest.raises(TypeError):
            ChatClient()  # type: ignore

    def test_speech_client_is_abstract(self):
        with pytest.raises(TypeError):
            SpeechClient()  # type: ignore


class TestSystemInstruction:
    """Tests for the persona prompt."""

    def test_polish(self):
        instruction = get_system_instruction(Language.PL)
        assert "Answer exclusively in Polish" in instruction
        assert "Sofia" in instruction
        assert "ISAP" in instruction

    def test_russian(self):
        assert "Answer exclusively in Russian" in get_system_instruction(Language.RU)

    def test_working_directory_override(self, tmp_path, monkeypatch):
        (tmp_path / "prompts").mkdir()
        (tmp_path / "prompts" / "system.txt").write_text("Custom persona in {language}.", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        clear_cache()
        try:
            assert get_system_instruction(Language.PL) == "Custom persona in Polish."
        finally:
            clear_cache()

    def test_environment_directory_wins(self, tmp_path, monkeypatch):
        (tmp_path / "prompts").mkdir()
        (tmp_path / "prompts" / "system.txt").write_text("Local in {language}.", encoding="utf-8")
        (tmp_path / "custom").mkdir()
        (tmp_path / "custom" / "system.txt").write_text("Tuned in {language}.", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv(PROMPTS_DIR_ENV, str(tmp_path / "custom"))
        clear_cache()
        try:
            assert get_system_instruction(Language.RU) == "Tuned in Russian."
        finally:
            clear_cache()

    def test_missing_template_lists_locations(self, tmp_path, monkeypatch):
        monkeypatch.setenv(PROMPTS_DIR_ENV, str(tmp_path))
        clear_cache()
        try:
            with pytest.raises(FileNotFoundError, match="no_such_prompt.txt") as exc_info:
                load_prompt("no_such_prompt")
            assert str(tmp_path) in str(exc_info.value)
        finally:
            clear_cache()


class TestBuildParts:
    """Tests for request part assembly."""

    def test_prompt_only_has_no_inline_data(self):
        parts = build_parts("Kiedy trzeba zarejestrować się do VAT?")

        assert len(parts) == 1
        assert parts[0].text == "Kiedy trzeba zarejestrować się do VAT?"
        assert parts[0].inline_data is None

    def test_file_goes_first_without_header(self, pdf_attachment):
        parts = build_parts("Co to jest?", pdf_attachment)

        assert len(parts) == 2
        assert parts[0].inline_data.mime_type == "application/pdf"
        assert parts[0].inline_data.data == b"%PDF-1.4 test"
        assert parts[1].text == "Co to jest?"


class TestExtractSources:
    """Tests for grounding source extraction."""

    def test_drops_entries_without_uri(self, chat_response):
        response = chat_response("ok", chunks=[
            {"title": "Ustawa o VAT", "uri": "https://isap.sejm.gov.pl/vat"},
            {"title": "No link", "uri": None},
            {"title": "Empty link", "uri": ""},
        ])
        sources = extract_sources(response)

        assert [s.uri for s in sources] == ["https://isap.sejm.gov.pl/vat"]

    def test_drops_chunks_without_web(self, chat_response):
        response = chat_response("ok", chunks=[None, {"title": "A", "uri": "https://a.pl"}])
        assert len(extract_sources(response)) == 1

    def test_deduplicates_by_uri(self, chat_response):
        response = chat_response("ok", chunks=[
            {"title": "A", "uri": "https://a.pl"},
            {"title": "B", "uri": "https://b.pl"},
            {"title": "A again", "uri": "https://a.pl"},
        ])
        sources = extract_sources(response)

        assert [(s.title, s.uri) for s in sources] == [("A", "https://a.pl"), ("B", "https://b.pl")]

    def test_missing_title_falls_back_to_uri(self, chat_response):
        response = chat_response("ok", chunks=[{"title": None, "uri": "https://a.pl"}])
        assert extract_sources(response)[0].title == "https://a.pl"

    def test_no_candidates(self):
        class Empty:
            candidates = None

        assert extract_sources(Empty()) == []

    @given(st.lists(st.sampled_from(["https://a.pl", "https://b.pl", "", None]), max_size=20))
    def test_sources_always_unique_with_uri(self, uris):
        """Property: every kept source has a URI and no URI repeats."""
        chunks = [SimpleNamespace(web=SimpleNamespace(title="t", uri=uri)) for uri in uris]
        response = SimpleNamespace(candidates=[
            SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=chunks))
        ])
        kept = [s.uri for s in extract_sources(response)]

        assert all(kept)
        assert len(kept) == len(set(kept))


class TestGeminiChatClient:
    """Tests for GeminiChatClient with a mocked SDK."""

    @pytest.mark.asyncio
    async def test_ask_returns_answer_and_sources(self, genai_client, chat_response):
        genai_client.aio.models.generate_content.return_value = chat_response(
            "Termin to 7 dni.",
            chunks=[
                {"title": "ISAP", "uri": "https://isap.sejm.gov.pl"},
                {"title": "Missing", "uri": None},
            ]
        )
        client = GeminiChatClient(api_key="fake-key", client=genai_client)

        result = await client.ask("What is VAT registration deadline?", Language.PL)

        assert isinstance(result, ChatAnswer)
        assert not result.is_fallback
        assert result.text == "Termin to 7 dni."
        assert len(result.sources) == 1
        assert result.sources[0].uri == "https://isap.sejm.gov.pl"

    @pytest.mark.asyncio
    async def test_ask_builds_grounded_request(self, genai_client, chat_response):
        genai_client.aio.models.generate_content.return_value = chat_response("ok")
        client = GeminiChatClient(api_key="fake-key", model="gemini-test", client=genai_client)

        await client.ask("Pytanie", Language.RU)

        kwargs = genai_client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert [p.text for p in kwargs["contents"].parts] == ["Pytanie"]
        config = kwargs["config"]
        assert "Answer exclusively in Russian" in config.system_instruction
        assert config.tools[0].google_search is not None

    @pytest.mark.asyncio
    async def test_ask_sends_file_inline(self, genai_client, chat_response, pdf_attachment):
        genai_client.aio.models.generate_content.return_value = chat_response("ok")
        client = GeminiChatClient(api_key="fake-key", client=genai_client)

        await client.ask("Co to jest?", Language.PL, pdf_attachment)

        parts = genai_client.aio.models.generate_content.call_args.kwargs["contents"].parts
        assert parts[0].inline_data.data == base64.b64decode("JVBERi0xLjQgdGVzdA==")
        assert parts[1].text == "Co to jest?"

    @pytest.mark.asyncio
    async def test_empty_text_uses_fallback(self, genai_client, chat_response):
        genai_client.aio.models.generate_content.return_value = chat_response(None)
        client = GeminiChatClient(api_key="fake-key", client=genai_client)

        result = await client.ask("?", Language.PL)

        assert result.text == NO_RESPONSE_TEXT
        assert result.sources is None

    @pytest.mark.asyncio
    async def test_transport_error_never_escapes(self, genai_client):
        genai_client.aio.models.generate_content.side_effect = ConnectionError("network down")
        client = GeminiChatClient(api_key="fake-key", client=genai_client)

        result = await client.ask("What is VAT registration deadline?", Language.PL)

        assert isinstance(result, ChatFallback)
        assert result.is_fallback
        assert result.text == ERROR_TEXT
        assert result.sources is None

    @pytest.mark.asyncio
    async def test_malformed_attachment_is_absorbed(self, genai_client):
        bad = AttachedFile(name="x.bin", mime_type="application/octet-stream", data="data:x;base64,@@@")
        client = GeminiChatClient(api_key="fake-key", client=genai_client)

        result = await client.ask("?", Language.PL, bad)

        assert isinstance(result, ChatFallback)
        genai_client.aio.models.generate_content.assert_not_called()

    @pytest.mark.asyncio
    async def test_context_manager(self, genai_client):
        async with GeminiChatClient(api_key="fake-key", client=genai_client) as client:
            assert client.model == "gemini-3-pro-preview"

    @pytest.mark.asyncio
    @pytest.mark.integration
    async def test_ask_real_api(self, api_keys):
        """Integration test: ask Gemini with grounding."""
        if not api_keys["gemini"]:
            pytest.skip("GEMINI_API_KEY not set")

        client = GeminiChatClient(api_key=api_keys["gemini"])
        result = await client.ask("What is VAT registration deadline?", Language.PL)

        assert isinstance(result.text, str)
        assert result.text
        assert result.sources is None or isinstance(result.sources, list)


class TestGeminiSpeechClient:
    """Tests for GeminiSpeechClient with a mocked SDK."""

    @pytest.mark.asyncio
    async def test_returns_raw_bytes(self, genai_client, speech_response):
        genai_client.aio.models.generate_content.return_value = speech_response(b"\x00\x00\xff\x7f")
        client = GeminiSpeechClient(api_key="fake-key", client=genai_client)

        audio = await client.synthesize("Dzień dobry")

        assert audio == b"\x00\x00\xff\x7f"
        assert client.sample_rate == 24000
        assert client.channels == 1

    @pytest.mark.asyncio
    async def test_decodes_base64_payload(self, genai_client, speech_response):
        payload = base64.b64encode(b"\x01\x02\x03\x04").decode()
        genai_client.aio.models.generate_content.return_value = speech_response(payload)
        client = GeminiSpeechClient(api_key="fake-key", client=genai_client)

        assert await client.synthesize("test") == b"\x01\x02\x03\x04"

    @pytest.mark.asyncio
    async def test_request_uses_audio_modality_and_voice(self, genai_client, speech_response):
        genai_client.aio.models.generate_content.return_value = speech_response(b"\x00\x00")
        client = GeminiSpeechClient(api_key="fake-key", voice="Puck", client=genai_client)

        await client.synthesize("Cześć")

        kwargs = genai_client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash-preview-tts"
        assert kwargs["contents"][0].parts[0].text == "Cześć"
        config = kwargs["config"]
        assert config.response_modalities == ["AUDIO"]
        assert config.speech_config.voice_config.prebuilt_voice_config.voice_name == "Puck"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("data", [b"", "", None])
    async def test_empty_audio_returns_none(self, genai_client, speech_response, data):
        genai_client.aio.models.generate_content.return_value = speech_response(data)
        client = GeminiSpeechClient(api_key="fake-key", client=genai_client)

        assert await client.synthesize("test") is None

    @pytest.mark.asyncio
    async def test_no_candidates_returns_none(self, genai_client):
        genai_client.aio.models.generate_content.return_value = types.GenerateContentResponse()
        client = GeminiSpeechClient(api_key="fake-key", client=genai_client)

        assert await client.synthesize("test") is None

    @pytest.mark.asyncio
    async def test_malformed_base64_returns_none(self, genai_client, speech_response):
        genai_client.aio.models.generate_content.return_value = speech_response("not base64!")
        client = GeminiSpeechClient(api_key="fake-key", client=genai_client)

        assert await client.synthesize("test") is None

    @pytest.mark.asyncio
    async def test_transport_error_returns_none(self, genai_client):
        genai_client.aio.models.generate_content.side_effect = TimeoutError()
        client = GeminiSpeechClient(api_key="fake-key", client=genai_client)

        assert await client.synthesize("test") is None
        assert genai_client.aio.models.generate_content.await_count == 1


class TestClientFactories:
    """Tests for client factory functions."""

    def test_create_chat_client(self, genai_client):
        client = create_chat_client("gemini", api_key="test-key", client=genai_client)
        assert isinstance(client, GeminiChatClient)

    def test_create_speech_client(self, genai_client):
        client = create_speech_client("GEMINI", api_key="test-key", voice="Kore", client=genai_client)
        assert isinstance(client, GeminiSpeechClient)
        assert client.voice == "Kore"

    def test_unknown_provider_raises(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_chat_client("unknown", api_key="test-key")
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_speech_client("unknown", api_key="test-key")

    def test_missing_api_key_raises(self):
        with pytest.raises(TypeError, match="requires 'api_key'"):
            create_chat_client("gemini")
        with pytest.raises(TypeError, match="requires 'api_key'"):
            create_speech_client("gemini")
