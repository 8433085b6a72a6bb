"""User-facing text for every dialogue outcome."""

from __future__ import annotations

from eventbot.models.parameters import ParameterSet
from eventbot.models.record import EventRecord
from eventbot.normalizer import contact_for

GOOGLE_FORM_URL = "https://bit.ly/hfn-event-summary-submit"
EVENTS_PORTAL = "events.heartfulness.org"
CONNECT_REPORT_URL = "http://bit.ly/hfn-connect-report"
PHOTOS_EMAIL = "photos@heartfulness.org"
PHOTOS_FOLDER_URL = "https://drive.google.com/drive/folders/10VMvrv4tZMm1MjqoQ6dtqZWNputWCP-p"
WHATSAPP_NUMBER = "+14155238886"
WHATSAPP_JOIN_CODE = "join harlequin-tuatara"
TELEGRAM_BOT = "@hfn_event_bot"


class ResponseComposer:
    """Renders replies; addresses for help and support are configurable."""

    def __init__(self, support_email: str, help_email: str) -> None:
        self._support_email = support_email
        self._help_email = help_email

    def welcome(self) -> str:
        return (
            "Greetings!\n\n"
            f"You can also upload event data with Google forms here: {GOOGLE_FORM_URL}\n\n"
            "What Heartfulness event are you reporting on?\n\n"
            "For example, you can enter Dhyanotsav, AtWork, C-Connect, V-Connect, G-Connect, "
            "CME, Youth, Yoga, Temple, Legal, Family, NGO, Brighter Minds, etc.\n\n"
            "For general Heartfulness Introductory Events, just enter \"Heartfulness\".\n\n"
            "For School or S-Connect events, enter which program: HELP, INSPIRE, HEART or THWC\n\n"
            "For Group Meditations, simply enter \"Satsangh\" or \"Group Meditation\"\n\n"
            "If you don't know just enter 'Other'."
        )

    def prompt(self, prompt_text: str) -> str:
        return prompt_text

    def invalid_date(self, prompt_text: str) -> str:
        return f"Sorry, I couldn't understand that date. {prompt_text}"

    def redirect(self, message: str) -> str:
        return message

    def confirmation(self, known: ParameterSet, date: str, city: str) -> str:
        return (
            f"Okay, {known.event_count} attended {known.event_type} on {date} "
            f"at {known.event_institution} in {city}, "
            f"Is this correct {known.coordinator_name}? Please reply with 'yes' or 'no'."
        )

    def thank_you(self, record: EventRecord) -> str:
        parts = [
            "Thanks for submitting the information and all the best.",
            "Please submit the complete feedback with attendee information (if available) "
            f"at our Events Portal: {EVENTS_PORTAL}",
            f"You can view the latest reports on Heartfulness Connect activities here: {CONNECT_REPORT_URL}",
            "If you like this app, please inform other coordinators to use the app by sending "
            f"the following *WhatsApp message to {WHATSAPP_NUMBER}*:\n*{WHATSAPP_JOIN_CODE}*",
            f"Or if you prefer *Telegram*, start a chat with {TELEGRAM_BOT} to use this app",
        ]
        contact = contact_for(record.type)
        if contact:
            parts.append(f"Please contact {contact} for any questions or to send photos of the event.")
        parts.append(
            f"Please email high resolution photos to {PHOTOS_EMAIL} or upload them to {PHOTOS_FOLDER_URL}."
        )
        parts.append(f"For any help or feedback on this application, please email {self._help_email}.")
        return "\n\n".join(parts)

    def apology(self) -> str:
        return (
            "Looks like we had some problem capturing this information. "
            "This could be due to some internal error. "
            f"Can you please email {self._support_email} with the screenshot? "
            "Thanks and apologies for the inconvenience."
        )
