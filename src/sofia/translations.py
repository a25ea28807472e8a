"""Localized interface strings.

Hides which languages the assistant speaks and how each one words the
interface. Answer language and interface language are always the same.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Language(str, Enum):
    """Answer and interface language."""

    PL = "PL"
    RU = "RU"

    @property
    def display_name(self) -> str:
        """English name of the language, as used in the system instruction."""
        return {Language.PL: "Polish", Language.RU: "Russian"}[self]


class TranslationStrings(BaseModel):
    """Every user-facing string of the chat interface."""

    model_config = ConfigDict(frozen=True)

    header: str
    welcome: str
    what_i_can_do: str
    capabilities: list[str]
    placeholder: str
    send: str
    recording: str
    stop_recording: str
    voice_message: str
    summarizing: str
    answer: str
    listen: str
    sources: str
    upload_hint: str
    legal_notice: str
    consultation: str


TRANSLATIONS: dict[Language, TranslationStrings] = {
    Language.PL: TranslationStrings(
        header="Twój Wirtualny Asystent",
        welcome="Cześć! Nazywam się Sofia. Jak mogę Ci pomóc?",
        what_i_can_do="Co ja umiem?",
        capabilities=[
            "Wyszukiwanie odpowiedzi w polskim ustawodawstwie (księgowość/podatki/kadry)",
            "Odpowiedzi biznesowe związane z prowadzeniem działalności w Polsce",
            "Streszczanie dokumentów: 'o co chodzi' + 'co trzeba zrobić'",
        ],
        placeholder="Wpisz pytanie lub dołącz plik (/attach)...",
        send="Wyślij",
        recording="Nagrywanie... (Enter, aby zakończyć)",
        stop_recording="Zatrzymaj",
        voice_message="[Nagranie głosowe]",
        summarizing="Analizuję...",
        answer="Odpowiedź",
        listen="Odtwórz odpowiedź",
        sources="Źródła",
        upload_hint="PDF, DOCX, JPG, PNG",
        legal_notice=(
            "Wskazówka: Moje odpowiedzi opierają się na polskim prawie. "
            "Zawsze podaję podstawę prawną, jeśli jest dostępna."
        ),
        consultation=(
            "To jest informacja ogólna. W celu uzyskania wiążącej opinii "
            "zalecam konsultację ze specjalistą."
        ),
    ),
    Language.RU: TranslationStrings(
        header="Ваш виртуальный помощник",
        welcome="Здравствуйте! Меня зовут София. Чем могу помочь?",
        what_i_can_do="Что я умею?",
        capabilities=[
            "Поиск ответов в польском законодательстве (бухгалтерия/налоги/кадры)",
            "Бизнес-консультации по ведению деятельности в Польше",
            "Краткий обзор документов: «о чем речь» + «что нужно сделать»",
        ],
        placeholder="Введите вопрос или прикрепите файл (/attach)...",
        send="Отправить",
        recording="Запись... (Enter, чтобы остановить)",
        stop_recording="Остановить",
        voice_message="[Голосовое сообщение]",
        summarizing="Анализирую...",
        answer="Ответ",
        listen="Прослушать ответ",
        sources="Источники",
        upload_hint="PDF, DOCX, JPG, PNG",
        legal_notice=(
            "Примечание: Мои ответы основаны на польском праве. "
            "Я всегда указываю правовую основу, если она доступна."
        ),
        consultation=(
            "Это общая информация. Для получения официального заключения "
            "рекомендую проконсультироваться со специалистом."
        ),
    ),
}


def get_strings(language: Language) -> TranslationStrings:
    """Get the interface strings for a language."""
    return TRANSLATIONS[language]
