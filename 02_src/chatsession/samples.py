"""Preset conversations that open a session with seeded state."""

from dataclasses import dataclass, field

from .attachments import link
from .models import Message, Participant, SessionConfig


@dataclass
class Sample:
    """A preset: model settings, seed history and remote files."""

    title: str
    description: str
    model_name: str | None = None
    system_instruction: str | None = None
    initial_prompt: str = ""
    history: list[tuple[Participant, str]] = field(default_factory=list)
    file_links: list[tuple[str, str]] = field(default_factory=list)  # (url, mime_type)

    def to_config(self) -> SessionConfig:
        """Build a SessionConfig with fresh message and attachment objects."""
        config = SessionConfig(
            system_instruction=self.system_instruction,
            title=self.title,
            initial_prompt=self.initial_prompt,
            history=[
                Message(participant=participant, content=content)
                for participant, content in self.history
            ],
            attachments=[link(url, mime_type) for url, mime_type in self.file_links],
        )
        if self.model_name:
            config.model_name = self.model_name
        return config


SAMPLES: list[Sample] = [
    Sample(
        title="Travel tips",
        description="The user wants the model to help a new traveler with travel tips",
        history=[
            (
                Participant.USER,
                "I have never traveled before. When should I book a flight?",
            ),
            (
                Participant.ASSISTANT,
                "You should book flights a couple of months ahead of time. "
                "It will be cheaper and more flexible for you.",
            ),
            (Participant.USER, "Do I need a passport?"),
            (
                Participant.ASSISTANT,
                "If you are traveling outside your own country, make sure your "
                "passport is up-to-date and valid for more than 6 months during "
                "your travel.",
            ),
        ],
        initial_prompt="What else is important when traveling?",
        system_instruction=(
            "You are a Travel assistant. You will answer questions the user asks "
            "based on the information listed in Relevant Information. Do not "
            "hallucinate. Do not use the internet."
        ),
    ),
    Sample(
        title="Chatbot recommendations for courses",
        description="A chatbot suggests courses for a performing arts program.",
        initial_prompt="I am interested in Performing Arts. I have taken Theater 1A.",
        system_instruction=(
            "You are a chatbot for the county's performing and fine arts program. "
            "You help students decide what course they will take during the summer."
        ),
    ),
    Sample(
        title="Blog post creator",
        description="Create a blog post from an image file stored in Cloud Storage.",
        initial_prompt=(
            "Write a short, engaging blog post based on this picture. It should "
            "include a description of the meal in the photo and talk about my "
            "journey meal prepping."
        ),
        file_links=[
            (
                "https://storage.googleapis.com/cloud-samples-data/generative-ai/image/meal-prep.jpeg",
                "image/jpeg",
            ),
        ],
    ),
]
