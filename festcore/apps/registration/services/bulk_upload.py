# festcore/apps/registration/services/bulk_upload.py
from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from django.conf import settings
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction
from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter

from festcore.apps.accounts.forms import validate_username_format
from festcore.apps.accounts.models import Profile
from festcore.apps.communities.models import Community
from festcore.apps.core.errors import BadRequest, ValidationFailed
from festcore.apps.sports.models import Sport
from festcore.apps.sports.services.taxonomy import incompatibility_error, resolve_sport_labels

from ..models import Participant, ParticipantSport

logger = logging.getLogger(__name__)


# ======================
# Cabeceras
# ======================

TEMPLATE_HEADERS = [
    "firstName *",
    "lastName *",
    "middleName",
    "email *",
    "phone *",
    "dob *",
    "gender *",
    "username *",
    "password *",
    "nextOfKinFirstName *",
    "nextOfKinLastName *",
    "nextOfKinMiddleName",
    "nextOfKinPhone *",
    "paymentDetails *",
    "sports *",
    "community *",
]

REQUIRED_FIELDS = [
    "firstName",
    "lastName",
    "email",
    "phone",
    "dob",
    "gender",
    "username",
    "password",
    "nextOfKinFirstName",
    "nextOfKinLastName",
    "nextOfKinPhone",
    "paymentDetails",
    "sports",
]

# clave normalizada -> campo canónico
HEADER_SYNONYMS = {
    "firstname": "firstName",
    "fname": "firstName",
    "givenname": "firstName",
    "lastname": "lastName",
    "lname": "lastName",
    "surname": "lastName",
    "familyname": "lastName",
    "middlename": "middleName",
    "othername": "middleName",
    "email": "email",
    "emailaddress": "email",
    "phone": "phone",
    "phonenumber": "phone",
    "mobile": "phone",
    "telephone": "phone",
    "dob": "dob",
    "dateofbirth": "dob",
    "birthdate": "dob",
    "gender": "gender",
    "sex": "gender",
    "username": "username",
    "password": "password",
    "nextofkinfirstname": "nextOfKinFirstName",
    "nokfirstname": "nextOfKinFirstName",
    "nextofkinlastname": "nextOfKinLastName",
    "noklastname": "nextOfKinLastName",
    "nextofkinmiddlename": "nextOfKinMiddleName",
    "nokmiddlename": "nextOfKinMiddleName",
    "nextofkinphone": "nextOfKinPhone",
    "nokphone": "nextOfKinPhone",
    "paymentdetails": "paymentDetails",
    "payment": "paymentDetails",
    "notes": "paymentDetails",
    "sports": "sports",
    "sport": "sports",
    "community": "community",
    "communityname": "community",
    "teamname": "teamName",
    "team": "teamName",
}

DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%m/%d/%Y")


def normalize_header(raw: Any) -> Optional[str]:
    """'First Name *' / 'first_name' / 'FIRSTNAME' -> 'firstName'. Desconocida -> None."""
    key = re.sub(r"[\s*_\-.]", "", str(raw or "")).lower()
    return HEADER_SYNONYMS.get(key)


# ======================
# Lectura del archivo
# ======================

def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _records(header: Sequence[Any], rows: Iterable[Sequence[Any]]) -> List[Dict[str, str]]:
    keys = [normalize_header(h) for h in header]
    if not any(keys):
        raise BadRequest("The file has no recognizable header row")
    out = []
    for values in rows:
        texts = [_cell_text(v) for v in values]
        if not any(texts):
            continue
        record: Dict[str, str] = {}
        for key, text in zip(keys, texts):
            if key and text and key not in record:
                record[key] = text
        out.append(record)
    return out


def read_rows(filename: str, content: bytes) -> List[Dict[str, str]]:
    """CSV o XLSX -> una lista de dicts con claves canónicas. Filas vacías se ignoran."""
    name = (filename or "").lower()
    if name.endswith(".csv"):
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError:
            text = content.decode("latin-1")
        reader = csv.reader(io.StringIO(text))
        header = next(reader, None)
        if header is None:
            raise BadRequest("The file is empty")
        return _records(header, reader)

    if name.endswith((".xlsx", ".xlsm")):
        try:
            wb = load_workbook(filename=io.BytesIO(content), read_only=True, data_only=True)
        except Exception as exc:
            raise BadRequest(f"Could not read the spreadsheet: {exc}")
        try:
            rows = wb.worksheets[0].iter_rows(values_only=True)
            header = next(rows, None)
            if header is None:
                raise BadRequest("The file is empty")
            return _records(header, rows)
        finally:
            wb.close()

    raise BadRequest("Unsupported file type. Upload a .csv or .xlsx file")


# ======================
# Validación de filas
# ======================

def parse_date(value: str) -> Optional[date]:
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).date()
        except ValueError:
            pass
    return None


@dataclass
class UploadResult:
    success: List[dict] = field(default_factory=list)
    skipped: List[dict] = field(default_factory=list)
    errors: List[dict] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "successCount": len(self.success),
            "skippedCount": len(self.skipped),
            "errorCount": len(self.errors),
            "success": self.success,
            "skipped": self.skipped,
            "errors": self.errors,
        }


def _validate(record: Dict[str, str], community: Optional[Community], communities: Dict[str, Community],
              active_sports: List[Sport]) -> Tuple[List[str], dict]:
    """Devuelve (errores, datos limpios). Todas las fallas de la fila juntas."""
    errors = [f"{name} is required" for name in REQUIRED_FIELDS if not record.get(name)]
    clean: dict = {}

    target = community
    if target is None:
        name = record.get("community", "")
        if not name:
            errors.append("community is required")
        else:
            target = communities.get(name.casefold())
            if target is None:
                errors.append(f"Community not found: {name}")
            elif not target.active:
                errors.append(f"Community is not active: {name}")
    clean["community"] = target

    username = record.get("username", "")
    if username:
        try:
            validate_username_format(username)
        except ValidationError as exc:
            errors.extend(exc.messages)

    password = record.get("password", "")
    if password and len(password) < 6:
        errors.append("Password must be at least 6 characters")

    email = record.get("email", "")
    if email:
        try:
            validate_email(email)
        except ValidationError:
            errors.append(f"Invalid email: {email}")

    gender = record.get("gender", "").lower()
    if gender and gender not in ("male", "female"):
        errors.append("gender must be 'male' or 'female'")
    clean["gender"] = gender

    raw_dob = record.get("dob", "")
    if raw_dob:
        clean["dob"] = parse_date(raw_dob)
        if clean["dob"] is None:
            errors.append(f"Invalid date of birth: {raw_dob}. Use YYYY-MM-DD, DD/MM/YYYY or MM/DD/YYYY")

    if record.get("sports"):
        resolution = resolve_sport_labels(record["sports"], active_sports)
        if not resolution.ok:
            errors.append(resolution.error)
        else:
            conflict = incompatibility_error(resolution.sport_ids)
            if conflict:
                errors.append(conflict)
        clean["sport_ids"] = resolution.sport_ids

    return errors, clean


def _create(record: Dict[str, str], clean: dict) -> Participant:
    with transaction.atomic():
        user = User(
            username=record["username"],
            email=record["email"],
            first_name=record["firstName"],
            last_name=record["lastName"],
        )
        user.set_password(record["password"])
        user.save()
        Profile.objects.update_or_create(
            user=user, defaults={"role": Profile.ROLE_USER, "community": clean["community"]}
        )
        next_of_kin = {
            "firstName": record["nextOfKinFirstName"],
            "lastName": record["nextOfKinLastName"],
            "phone": record["nextOfKinPhone"],
        }
        if record.get("nextOfKinMiddleName"):
            next_of_kin["middleName"] = record["nextOfKinMiddleName"]
        participant = Participant.objects.create(
            user=user,
            community=clean["community"],
            first_name=record["firstName"],
            middle_name=record.get("middleName", ""),
            last_name=record["lastName"],
            gender=clean["gender"],
            dob=clean["dob"],
            email=record["email"],
            phone=record["phone"],
            next_of_kin=next_of_kin,
            team_name=record.get("teamName", ""),
            notes=record["paymentDetails"],
            status=Participant.STATUS_ACCEPTED,
        )
        ParticipantSport.objects.bulk_create(
            [ParticipantSport(participant=participant, sport_id=sid) for sid in clean["sport_ids"]]
        )
    return participant


def process_upload(records: List[Dict[str, str]], community: Optional[Community] = None) -> UploadResult:
    """
    Procesa filas en orden, cada una en su propia transacción.
    Los problemas por fila nunca abortan el lote: se acumulan en el resultado.
    'row' es el número de fila de datos (la cabecera no cuenta).
    """
    limit = settings.BULK_UPLOAD_MAX_ROWS
    if len(records) > limit:
        raise BadRequest(f"Too many rows: {len(records)}. The maximum per upload is {limit}")
    if not records:
        raise BadRequest("The file contains no participant rows")
    if community is not None and not community.active:
        raise ValidationFailed("Community is not active")

    active_sports = list(Sport.objects.filter(active=True))
    communities = {c.name.casefold(): c for c in Community.objects.all()}
    seen_usernames: set = set()
    result = UploadResult()

    for row, record in enumerate(records, start=1):
        email = record.get("email", "")
        username = record.get("username", "")

        if username and (
            username.lower() in seen_usernames
            or User.objects.filter(username__iexact=username).exists()
        ):
            result.skipped.append({"row": row, "email": email, "reason": f"Username already exists: {username}"})
            continue

        errors, clean = _validate(record, community, communities, active_sports)
        if errors:
            result.errors.append({"row": row, "email": email, "errors": errors})
            continue

        try:
            participant = _create(record, clean)
        except IntegrityError as exc:
            result.errors.append({"row": row, "email": email, "errors": [str(exc)]})
            continue

        seen_usernames.add(username.lower())
        result.success.append(
            {
                "row": row,
                "participantId": participant.pk,
                "username": username,
                "email": email,
                "name": participant.full_name,
            }
        )

    logger.info(
        "Carga masiva (%s): %s ok, %s omitidas, %s con error",
        community or "varias comunidades",
        len(result.success),
        len(result.skipped),
        len(result.errors),
    )
    return result


# ======================
# Plantilla XLSX
# ======================

EXAMPLE_ROWS = [
    [
        "John", "Doe", "Michael", "john.doe@example.com", "+254712345678", "1990-01-15", "male",
        "johndoe", "SecurePass123", "Jane", "Doe", "Marie", "+254700000000",
        "Payment via M-Pesa, Transaction ID: ABC123XYZ", "Football, Athletics - 100m Sprint",
        "Nairobi Central",
    ],
    [
        "Ahmed", "Hassan", "", "ahmed.hassan@example.com", "+254723456789", "20/05/1992", "male",
        "ahmedhassan", "MyPassword123", "Fatuma", "Hassan", "", "+254711111111",
        "Payment confirmed via bank transfer, Ref: BANK123", "Swimming", "Nairobi Central",
    ],
]

INSTRUCTIONS = [
    "FIELD DESCRIPTIONS",
    "",
    "REQUIRED FIELDS (marked with *):",
    "- firstName, lastName: participant's names",
    "- email: valid email address",
    "- phone: phone number (any format accepted)",
    "- dob: date of birth (YYYY-MM-DD, DD/MM/YYYY or MM/DD/YYYY)",
    "- gender: exactly 'male' or 'female'",
    "- username: unique login, 3-30 characters (letters, numbers, underscores, hyphens or dots)",
    "- password: minimum 6 characters",
    "- nextOfKinFirstName, nextOfKinLastName, nextOfKinPhone: next of kin details",
    "- paymentDetails: payment details or other registration notes",
    "- sports: comma-separated sport names (see the 'Sports Reference' sheet)",
    "- community: community name (ignored when uploading for your own community)",
    "",
    "OPTIONAL FIELDS: middleName, nextOfKinMiddleName",
    "",
    "IMPORTANT NOTES:",
    "- Uploaded participants are ACCEPTED automatically",
    "- Rows whose username already exists are SKIPPED (emails may repeat)",
    "- Sub-sports: use 'Parent - Child' (e.g. 'Athletics - 100m Sprint')",
    "- A bare child name works only when no other sport shares it",
    "- Sports marked incompatible cannot be selected together",
]


def _sports_reference() -> List[List[str]]:
    rows = [["Sport Category", "Selectable Name"]]
    sports = list(Sport.objects.filter(active=True).order_by("name"))
    for parent in (s for s in sports if s.parent_id is None):
        children = [s for s in sports if s.parent_id == parent.pk]
        if not children:
            rows.append(["-", parent.name])
            continue
        rows.append([parent.name, "(Parent Category - not selectable)"])
        for child in children:
            rows.append([parent.name, f"{parent.name} - {child.name}"])
    return rows


def build_template() -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Participants Template"
    ws.append(TEMPLATE_HEADERS)
    for row in EXAMPLE_ROWS:
        ws.append(row)
    for i, header in enumerate(TEMPLATE_HEADERS, start=1):
        longest = max(len(header), *(len(r[i - 1]) for r in EXAMPLE_ROWS))
        ws.column_dimensions[get_column_letter(i)].width = min(max(longest, 10), 50)

    info = wb.create_sheet("Instructions")
    for line in INSTRUCTIONS:
        info.append([line])
    info.column_dimensions["A"].width = 90

    ref = wb.create_sheet("Sports Reference")
    for row in _sports_reference():
        ref.append(row)
    ref.column_dimensions["A"].width = 30
    ref.column_dimensions["B"].width = 40

    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()
