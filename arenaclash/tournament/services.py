"""Service layer for tournament business logic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from arenaclash.core.constants import (
    PARTICIPANTS_COLLECTION,
    TOURNAMENT_COMPLETED,
    TOURNAMENT_STATUSES,
    TOURNAMENT_TYPES,
    TOURNAMENT_UPCOMING,
    TOURNAMENTS_COLLECTION,
    TRANSACTIONS_COLLECTION,
    TXN_ENTRY,
    TXN_PRIZE,
    TXN_SUCCESS,
    USERS_COLLECTION,
)
from arenaclash.errors import (
    AlreadyJoinedError,
    InsufficientBalanceError,
    NotFoundError,
    TournamentFullError,
    ValidationError,
)
from arenaclash.game.services import GameService
from arenaclash.notification.services import NotificationService
from arenaclash.utils import (
    EmailError,
    format_amount,
    parse_amount,
    send_email,
    snapshot_to_dict,
    timestamp_sort_key,
)

from .models import Registration

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction

ROOM_FIELDS = ("roomId", "roomPassword")
FEE_TOLERANCE = 0.005


class TournamentService:
    """Handles business logic and data access for tournaments."""

    @staticmethod
    def _get_ref(
        db: Client, tournament_id: str
    ) -> tuple[DocumentReference, dict[str, Any]]:
        """Resolve a tournament reference and its data, or raise NotFoundError."""
        ref = db.collection(TOURNAMENTS_COLLECTION).document(tournament_id)
        doc = cast(Any, ref.get())
        if not doc.exists:
            raise NotFoundError("Tournament does not exist!")
        return ref, snapshot_to_dict(doc)

    @staticmethod
    def _public_view(
        data: dict[str, Any], viewer_uid: str | None = None
    ) -> dict[str, Any]:
        """Shape a tournament for players. Room credentials are for participants."""
        participant_ids = data.pop("participant_ids", None) or []
        is_joined = bool(viewer_uid) and viewer_uid in participant_ids
        if not is_joined:
            for field in ROOM_FIELDS:
                data.pop(field, None)

        current = int(data.get("currentPlayers") or 0)
        maximum = int(data.get("maxPlayers") or 0)
        data["isJoined"] = is_joined
        data["isFull"] = current >= maximum
        data["isLive"] = data.get("status") == "live"
        return data

    @staticmethod
    def list_tournaments(
        db: Client, game: str | None = None, viewer_uid: str | None = None
    ) -> list[dict[str, Any]]:
        """Fetch tournaments, optionally for one game, latest date first."""
        query: Any = db.collection(TOURNAMENTS_COLLECTION)
        if game:
            query = query.where(filter=firestore.FieldFilter("game", "==", game))

        tournaments = [snapshot_to_dict(doc) for doc in query.stream()]
        tournaments.sort(
            key=lambda t: (str(t.get("date", "")), str(t.get("time", ""))),
            reverse=True,
        )
        return [TournamentService._public_view(t, viewer_uid) for t in tournaments]

    @staticmethod
    def list_all(db: Client) -> list[dict[str, Any]]:
        """Fetch every tournament with all fields, for the admin console."""
        tournaments = [
            snapshot_to_dict(doc)
            for doc in db.collection(TOURNAMENTS_COLLECTION).stream()
        ]
        tournaments.sort(key=lambda t: str(t.get("date", "")), reverse=True)
        return tournaments

    @staticmethod
    def get_tournament(
        db: Client, tournament_id: str, viewer_uid: str | None = None
    ) -> dict[str, Any]:
        """Fetch a single tournament as a player sees it."""
        _, data = TournamentService._get_ref(db, tournament_id)
        return TournamentService._public_view(data, viewer_uid)

    @staticmethod
    def _validate_against_game(data: dict[str, Any], game: dict[str, Any]) -> None:
        """Apply the game's fee defaults and limits to tournament data."""
        settings = game.get("defaultSettings") or {}
        min_fee = parse_amount(settings.get("minEntryFee"))
        max_fee = parse_amount(settings.get("maxEntryFee"))
        fee = parse_amount(data.get("entryFee"))
        if max_fee and not min_fee <= fee <= max_fee:
            raise ValidationError(
                f"Entry fee must be between ₹{format_amount(min_fee)} and "
                f"₹{format_amount(max_fee)} for {game.get('name')}."
            )
        if data.get("perKill") is None:
            data["perKill"] = parse_amount(settings.get("perKillBonus"))

    @staticmethod
    def create_tournament(db: Client, data: dict[str, Any]) -> str:
        """Create a tournament and return its ID."""
        game = GameService.find_by_name(db, data.get("game") or "")
        if not game:
            raise ValidationError("Unknown game.")
        TournamentService._validate_against_game(data, game)

        tournament_type = data.get("type") or TOURNAMENT_TYPES[0]
        if tournament_type not in TOURNAMENT_TYPES:
            raise ValidationError("Unknown tournament type.")

        tournament_payload = {
            "game": game["name"],
            "title": data["title"].strip(),
            "map": (data.get("map") or "").strip(),
            "entryFee": parse_amount(data.get("entryFee")),
            "prizePool": parse_amount(data.get("prizePool")),
            "perKill": parse_amount(data.get("perKill")),
            "date": data["date"],
            "time": data["time"],
            "maxPlayers": int(data.get("maxPlayers") or 100),
            "currentPlayers": 0,
            "participant_ids": [],
            "roomId": (data.get("roomId") or "").strip(),
            "roomPassword": (data.get("roomPassword") or "").strip(),
            "status": TOURNAMENT_UPCOMING,
            "type": tournament_type,
            "createdAt": firestore.SERVER_TIMESTAMP,
        }
        _, ref = db.collection(TOURNAMENTS_COLLECTION).add(tournament_payload)
        return str(ref.id)

    @staticmethod
    def update_tournament(
        db: Client, tournament_id: str, update_data: dict[str, Any]
    ) -> None:
        """Update tournament details that are safe to change."""
        ref, current = TournamentService._get_ref(db, tournament_id)
        current_players = int(current.get("currentPlayers") or 0)

        game = GameService.find_by_name(db, update_data.get("game") or "")
        if not game:
            raise ValidationError("Unknown game.")
        TournamentService._validate_against_game(update_data, game)

        max_players = int(update_data.get("maxPlayers") or current.get("maxPlayers"))
        if max_players < current_players:
            raise ValidationError(
                f"Max players cannot be lower than the {current_players} "
                "players already registered."
            )

        new_fee = parse_amount(update_data.get("entryFee"))
        old_fee = parse_amount(current.get("entryFee"))
        if current_players and abs(new_fee - old_fee) > FEE_TOLERANCE:
            raise ValidationError("Entry fee cannot change after players have joined.")

        ref.update(
            {
                "game": game["name"],
                "title": update_data["title"].strip(),
                "map": (update_data.get("map") or "").strip(),
                "entryFee": new_fee,
                "prizePool": parse_amount(update_data.get("prizePool")),
                "perKill": parse_amount(update_data.get("perKill")),
                "date": update_data["date"],
                "time": update_data["time"],
                "maxPlayers": max_players,
                "type": update_data.get("type") or current.get("type"),
            }
        )

    @staticmethod
    def set_status(db: Client, tournament_id: str, status: str) -> None:
        """Move a tournament to upcoming or live.

        Completion goes through complete_tournament so prizes are settled.
        """
        if status not in TOURNAMENT_STATUSES:
            raise ValidationError("Unknown tournament status.")
        if status == TOURNAMENT_COMPLETED:
            raise ValidationError("Use the complete action to finish a tournament.")
        ref, current = TournamentService._get_ref(db, tournament_id)
        if current.get("status") == TOURNAMENT_COMPLETED:
            raise ValidationError("Tournament is already completed.")
        ref.update({"status": status})

    @staticmethod
    def delete_tournament(db: Client, tournament_id: str) -> None:
        """Delete a tournament document and its participants."""
        ref, _ = TournamentService._get_ref(db, tournament_id)
        batch = db.batch()
        for participant in ref.collection(PARTICIPANTS_COLLECTION).stream():
            batch.delete(participant.reference)
        batch.delete(ref)
        batch.commit()

    @staticmethod
    def _join_in_transaction(  # noqa: PLR0913
        transaction: Transaction,
        db: Client,
        tournament_ref: DocumentReference,
        user_ref: DocumentReference,
        participant_ref: DocumentReference,
        ingame_name: str,
        expected_fee: float | None = None,
    ) -> dict[str, Any]:
        """Validate and apply a tournament registration inside a transaction."""
        # 1. Read phase
        tournament_doc = tournament_ref.get(transaction=transaction)
        user_doc = user_ref.get(transaction=transaction)
        participant_doc = participant_ref.get(transaction=transaction)

        # 2. Validation phase
        if not tournament_doc.exists:
            raise NotFoundError("Tournament does not exist!")
        if not user_doc.exists:
            raise NotFoundError("User profile not found!")
        if participant_doc.exists:
            raise AlreadyJoinedError()

        t_data = tournament_doc.to_dict() or {}
        if t_data.get("status") == TOURNAMENT_COMPLETED:
            raise ValidationError("Registration is closed for this tournament.")

        current_players = int(t_data.get("currentPlayers") or 0)
        if current_players >= int(t_data.get("maxPlayers") or 0):
            raise TournamentFullError()

        fee = parse_amount(t_data.get("entryFee"))
        if expected_fee is not None and abs(expected_fee - fee) > FEE_TOLERANCE:
            raise ValidationError("Entry fee has changed. Please review and try again.")

        u_data = user_doc.to_dict() or {}
        balance = parse_amount(u_data.get("walletBalance"))
        if balance < fee:
            raise InsufficientBalanceError(
                f"Insufficient balance! You need ₹{format_amount(fee)} but only "
                f"have ₹{format_amount(balance)}. Please top up your wallet first."
            )
        new_balance = round(balance - fee, 2)

        # 3. Write phase
        transaction.update(user_ref, {"walletBalance": new_balance})

        transaction.set(
            participant_ref,
            {
                "userId": user_ref.id,
                "displayName": u_data.get("displayName"),
                "email": u_data.get("email"),
                "ingameName": ingame_name,
                "joinedAt": firestore.SERVER_TIMESTAMP,
                "feePaid": fee,
            },
        )

        participant_ids = list(t_data.get("participant_ids") or [])
        participant_ids.append(user_ref.id)
        transaction.update(
            tournament_ref,
            {"currentPlayers": current_players + 1, "participant_ids": participant_ids},
        )

        ledger_ref = db.collection(TRANSACTIONS_COLLECTION).document()
        transaction.set(
            ledger_ref,
            {
                "userId": user_ref.id,
                "amount": fee,
                "type": TXN_ENTRY,
                "description": f"Joined Tournament: {t_data.get('title', '')}",
                "status": TXN_SUCCESS,
                "tournamentId": tournament_ref.id,
                "timestamp": firestore.SERVER_TIMESTAMP,
            },
        )

        return {
            "tournamentId": tournament_ref.id,
            "feePaid": fee,
            "walletBalance": new_balance,
            "currentPlayers": current_players + 1,
        }

    @staticmethod
    def join_tournament(
        db: Client,
        tournament_id: str,
        user_uid: str,
        ingame_name: str,
        expected_fee: float | None = None,
    ) -> dict[str, Any]:
        """Register a user for a tournament, paying the entry fee from the wallet."""
        ingame_name = (ingame_name or "").strip()
        if not ingame_name:
            raise ValidationError("Please enter your in-game name.")

        tournament_ref = db.collection(TOURNAMENTS_COLLECTION).document(tournament_id)
        user_ref = db.collection(USERS_COLLECTION).document(user_uid)
        participant_ref = tournament_ref.collection(PARTICIPANTS_COLLECTION).document(
            user_uid
        )

        join = firestore.transactional(TournamentService._join_in_transaction)
        result = join(
            db.transaction(),
            db,
            tournament_ref,
            user_ref,
            participant_ref,
            ingame_name,
            expected_fee,
        )
        logging.info(
            f"User {user_uid} joined tournament {tournament_id} "
            f"(fee {result['feePaid']})"
        )
        return cast(dict[str, Any], result)

    @staticmethod
    def list_participants(db: Client, tournament_id: str) -> list[dict[str, Any]]:
        """List a tournament's participants in join order."""
        ref, _ = TournamentService._get_ref(db, tournament_id)
        participants = [
            snapshot_to_dict(doc)
            for doc in ref.collection(PARTICIPANTS_COLLECTION).stream()
        ]
        participants.sort(key=lambda p: timestamp_sort_key(p.get("joinedAt")))
        return participants

    @staticmethod
    def get_user_registrations(db: Client, user_uid: str) -> list[Registration]:
        """Fetch the tournaments a user joined, most recent registration first."""
        query = db.collection(TOURNAMENTS_COLLECTION).where(
            filter=firestore.FieldFilter("participant_ids", "array_contains", user_uid)
        )

        registrations: list[Registration] = []
        for t_doc in query.stream():
            t_data = t_doc.to_dict() or {}
            p_doc = (
                t_doc.reference.collection(PARTICIPANTS_COLLECTION)
                .document(user_uid)
                .get()
            )
            if not p_doc.exists:
                continue
            p_data = p_doc.to_dict() or {}
            registrations.append(
                Registration(
                    tournamentId=t_doc.id,
                    tournamentTitle=t_data.get("title", ""),
                    game=t_data.get("game", ""),
                    status=t_data.get("status", TOURNAMENT_UPCOMING),
                    prizePool=t_data.get("prizePool", 0),
                    date=t_data.get("date", ""),
                    time=t_data.get("time", ""),
                    ingameName=p_data.get("ingameName", ""),
                    joinedAt=p_data.get("joinedAt"),
                    feePaid=p_data.get("feePaid", 0),
                    roomId=t_data.get("roomId", ""),
                    roomPassword=t_data.get("roomPassword", ""),
                )
            )

        registrations.sort(
            key=lambda r: timestamp_sort_key(r.get("joinedAt")), reverse=True
        )
        return registrations

    @staticmethod
    def publish_room_details(
        db: Client, tournament_id: str, room_id: str, room_password: str
    ) -> int:
        """Store room credentials and tell every participant about them."""
        ref, data = TournamentService._get_ref(db, tournament_id)
        room_id = room_id.strip()
        room_password = room_password.strip()
        ref.update({"roomId": room_id, "roomPassword": room_password})

        title = data.get("title", "your tournament")
        participants = TournamentService.list_participants(db, tournament_id)
        for participant in participants:
            NotificationService.create(
                db,
                participant["userId"],
                "Room details are live",
                f"{title}: Room ID {room_id}, Password {room_password}",
            )
            TournamentService._email_room_details(
                participant, data, room_id, room_password
            )
        return len(participants)

    @staticmethod
    def _email_room_details(
        participant: dict[str, Any],
        tournament: dict[str, Any],
        room_id: str,
        room_password: str,
    ) -> None:
        """Internal helper to email room credentials to one participant."""
        if not participant.get("email"):
            return
        try:
            send_email(
                to=participant["email"],
                subject=f"Room details: {tournament.get('title', '')}",
                template="email/room_details.html",
                participant=participant,
                tournament=tournament,
                room_id=room_id,
                room_password=room_password,
            )
        except EmailError as e:
            logging.error(f"Email failed: {e}")

    @staticmethod
    def _complete_in_transaction(
        transaction: Transaction,
        db: Client,
        tournament_ref: DocumentReference,
        prizes: dict[str, float],
    ) -> list[dict[str, Any]]:
        """Credit prizes and close the tournament inside a transaction."""
        tournament_doc = tournament_ref.get(transaction=transaction)
        if not tournament_doc.exists:
            raise NotFoundError("Tournament does not exist!")
        t_data = tournament_doc.to_dict() or {}
        if t_data.get("status") == TOURNAMENT_COMPLETED:
            raise ValidationError("Tournament is already completed.")

        reads = []
        for uid, amount in prizes.items():
            participant_ref = tournament_ref.collection(
                PARTICIPANTS_COLLECTION
            ).document(uid)
            user_ref = db.collection(USERS_COLLECTION).document(uid)
            participant_doc = participant_ref.get(transaction=transaction)
            user_doc = user_ref.get(transaction=transaction)
            if not participant_doc.exists or not user_doc.exists:
                raise ValidationError(f"Player {uid} did not play in this tournament.")
            reads.append((uid, amount, participant_ref, user_ref, user_doc))

        title = t_data.get("title", "")
        awarded = []
        for uid, amount, participant_ref, user_ref, user_doc in reads:
            balance = parse_amount((user_doc.to_dict() or {}).get("walletBalance"))
            new_balance = round(balance + amount, 2)
            transaction.update(user_ref, {"walletBalance": new_balance})
            transaction.update(participant_ref, {"prize": amount})
            transaction.set(
                db.collection(TRANSACTIONS_COLLECTION).document(),
                {
                    "userId": uid,
                    "amount": amount,
                    "type": TXN_PRIZE,
                    "description": f"Prize: {title}",
                    "status": TXN_SUCCESS,
                    "tournamentId": tournament_ref.id,
                    "timestamp": firestore.SERVER_TIMESTAMP,
                },
            )
            awarded.append({"userId": uid, "amount": amount, "walletBalance": new_balance})

        transaction.update(
            tournament_ref,
            {"status": TOURNAMENT_COMPLETED, "completedAt": firestore.SERVER_TIMESTAMP},
        )
        return awarded

    @staticmethod
    def complete_tournament(
        db: Client, tournament_id: str, prizes: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        """Finalize a tournament and pay out its prizes."""
        totals: dict[str, float] = {}
        for entry in prizes:
            uid = str(entry.get("userId") or "").strip()
            amount = parse_amount(entry.get("amount"))
            if not uid or amount <= 0:
                raise ValidationError("Each prize needs a userId and a positive amount.")
            totals[uid] = round(totals.get(uid, 0.0) + amount, 2)

        tournament_ref = db.collection(TOURNAMENTS_COLLECTION).document(tournament_id)
        complete = firestore.transactional(TournamentService._complete_in_transaction)
        awarded = complete(db.transaction(), db, tournament_ref, totals)

        title = TournamentService._get_ref(db, tournament_id)[1].get("title", "")
        for prize in awarded:
            NotificationService.create(
                db,
                prize["userId"],
                "Congratulations!",
                f"You won ₹{format_amount(prize['amount'])} in {title}.",
            )
        logging.info(f"Tournament {tournament_id} completed, {len(awarded)} prizes paid")
        return cast(list[dict[str, Any]], awarded)
