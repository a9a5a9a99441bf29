"""Convocation and cancellation notifiers.

Notifiers are invoked after a schedule or a cancellation is committed. Their
failures never undo the commit; the scheduling service logs them and reports
a warning. Mail bodies are in French, the language of the summoned students.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from django.conf import settings
from django.core.mail import send_mass_mail
from django.utils.module_loading import import_string

from scheduling.domain import Participant, Repartition, Room, ScheduledEvent
from scheduling.domain.errors import (
    CANCELLATIONS_NOT_SENT,
    CONVOCATIONS_NOT_SENT,
    NotificationFailure,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Convocation:
    """Everything needed to summon one participant to one seat."""

    event: ScheduledEvent
    participant: Participant
    room_name: str
    seat_number: int
    qr_payload: str


def qr_payload(event: ScheduledEvent, participant: Participant, room_name: str, seat: int) -> str:
    fields = (
        ("event", str(event.id)),
        ("ref", participant.external_ref),
        ("room", room_name),
        ("seat", str(seat)),
    )
    return ";".join(f"{key}={value}" for key, value in fields)


def build_convocations(
    event: ScheduledEvent,
    repartition: Repartition,
    participants: Iterable[Participant],
    rooms: Iterable[Room],
) -> list[Convocation]:
    """One convocation per assignment, in seating order."""
    people = {participant.id: participant for participant in participants}
    room_names = {room.id: room.name for room in rooms}
    convocations = []
    for assignment in repartition.assignments:
        participant = people[assignment.participant_id]
        room_name = room_names[assignment.room_id]
        convocations.append(
            Convocation(
                event=event,
                participant=participant,
                room_name=room_name,
                seat_number=assignment.seat_number,
                qr_payload=qr_payload(event, participant, room_name, assignment.seat_number),
            )
        )
    return convocations


class ConvocationNotifier(ABC):
    """Interface to whatever delivers convocations (mail, PDF service, ...)."""

    @abstractmethod
    def notify(self, event: ScheduledEvent, convocations: Sequence[Convocation]) -> None:
        """Deliver convocations.

        Raises:
            NotificationFailure: If delivery failed.
        """
        ...

    @abstractmethod
    def notify_cancellation(
        self, event: ScheduledEvent, participants: Sequence[Participant]
    ) -> None:
        """Tell previously summoned participants that the event is cancelled.

        Raises:
            NotificationFailure: If delivery failed.
        """
        ...


class LoggingNotifier(ConvocationNotifier):
    """Writes convocations to the log. Default when no mail backend is set up."""

    def notify(self, event: ScheduledEvent, convocations: Sequence[Convocation]) -> None:
        for convocation in convocations:
            logger.info(
                "Convocation %s: %s -> %s seat %d",
                event.title,
                convocation.participant.external_ref,
                convocation.room_name,
                convocation.seat_number,
            )

    def notify_cancellation(
        self, event: ScheduledEvent, participants: Sequence[Participant]
    ) -> None:
        for participant in participants:
            logger.info("Cancellation %s: %s", event.title, participant.external_ref)


class EmailNotifier(ConvocationNotifier):
    """Mails each participant that has an email address."""

    subject_template = "Convocation : {title}"
    body_template = (
        "Bonjour {name},\n\n"
        "Vous êtes convoqué(e) à l'épreuve {title} le {day} de {start} à {end}.\n"
        "Salle : {room}\nPlace : {seat}\n\n"
        "Référence : {qr}\n"
    )
    cancellation_subject_template = "Annulation : {title}"
    cancellation_body_template = (
        "Bonjour {name},\n\n"
        "L'épreuve {title} prévue le {day} de {start} à {end} est annulée.\n"
        "Votre convocation n'est plus valable.\n"
    )

    def __init__(self, from_email: str | None = None) -> None:
        self.from_email = from_email or settings.DEFAULT_FROM_EMAIL

    def notify(self, event: ScheduledEvent, convocations: Sequence[Convocation]) -> None:
        messages = [
            (
                self.subject_template.format(title=event.title),
                self.body_template.format(
                    name=c.participant.display_name,
                    room=c.room_name,
                    seat=c.seat_number,
                    qr=c.qr_payload,
                    **_when(event),
                ),
                self.from_email,
                [c.participant.email],
            )
            for c in convocations
            if c.participant.email
        ]
        self._send(messages, CONVOCATIONS_NOT_SENT)

    def notify_cancellation(
        self, event: ScheduledEvent, participants: Sequence[Participant]
    ) -> None:
        messages = [
            (
                self.cancellation_subject_template.format(title=event.title),
                self.cancellation_body_template.format(name=p.display_name, **_when(event)),
                self.from_email,
                [p.email],
            )
            for p in participants
            if p.email
        ]
        self._send(messages, CANCELLATIONS_NOT_SENT)

    def _send(self, messages, failure_message: str) -> None:
        if not messages:
            return
        try:
            send_mass_mail(messages, fail_silently=False)
        except (ValueError, OSError) as exc:
            raise NotificationFailure(str(exc), message=failure_message) from exc


def _when(event: ScheduledEvent) -> dict[str, str]:
    return {
        "title": event.title,
        "day": event.window.day.strftime("%d/%m/%Y"),
        "start": f"{event.window.start:%H:%M}",
        "end": f"{event.window.end:%H:%M}",
    }


def notifier_from_settings() -> ConvocationNotifier:
    path = settings.SCHEDULING.get("NOTIFIER", "scheduling.services.notifications.LoggingNotifier")
    return import_string(path)()
