"""
Integration tests for the Malkhana registry endpoints.

Scope in this file:
- POST   /api/malkhana/items/                    (Black Ink + Red Ink back-filing)
- POST   /api/malkhana/items/{id}/dispose/       (Red Ink renumbering)
- PATCH  /api/malkhana/items/{id}/
- POST   /api/malkhana/year-transition/
- GET    /api/malkhana/black-ink/, red-ink/, stats/, search/, mother-number/
- /api/malkhana/shelves/ CRUD, items and QR codes
- Error envelope: {"detail": ..., "code": ...} per domain error kind

Every request goes through the real JWT login flow.
"""

from __future__ import annotations

import uuid

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import User, UserType
from malkhana.models import ItemStatus, MalkhanaItem, RedInkHistory, RegistryType
from units.models import Unit


class MalkhanaAPITestBase(TestCase):

    password = "MalkhanaP@ss123"

    @classmethod
    def setUpTestData(cls):
        cls.station = Unit.objects.create(name="Kotwali PS", code="KTW")
        cls.other_station = Unit.objects.create(name="Civil Lines PS", code="CVL")

        cls.officer = User.objects.create_user(
            username="officer_ktw",
            password=cls.password,
            email="officer_ktw@example.com",
            badge_number="KTW-101",
            primary_unit=cls.station,
        )
        cls.other_officer = User.objects.create_user(
            username="officer_cvl",
            password=cls.password,
            email="officer_cvl@example.com",
            primary_unit=cls.other_station,
        )
        cls.admin = User.objects.create_user(
            username="district_admin",
            password=cls.password,
            email="district_admin@example.com",
            user_type=UserType.ADMIN,
        )
        cls.unassigned = User.objects.create_user(
            username="unassigned_staff",
            password=cls.password,
            email="unassigned_staff@example.com",
            user_type=UserType.STAFF,
        )

    def setUp(self):
        self.client = APIClient()
        self.items_url = reverse("malkhana:item-list")
        self.year = timezone.localdate().year

    # ─────────────────────────────────────────────────────────────────
    #  Helpers
    # ─────────────────────────────────────────────────────────────────

    def _login(self, user: User) -> str:
        response = self.client.post(
            reverse("accounts:login"),
            {"identifier": user.username, "password": self.password},
            format="json",
        )
        self.assertEqual(
            response.status_code,
            status.HTTP_200_OK,
            msg=f"Login failed for '{user.username}': {response.data}",
        )
        return response.data["access"]

    def _login_as(self, user: User) -> None:
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {self._login(user)}")

    def _item_payload(self, **overrides) -> dict:
        payload = {
            "category": "Weapon",
            "description": "Country-made pistol",
            "case_number": "FIR-112/2025",
            "date_received": timezone.now().isoformat(),
            "received_from": "SI Sharma",
            "condition": "Rusted",
        }
        payload.update(overrides)
        return payload

    def _create(self, **overrides) -> dict:
        response = self.client.post(self.items_url, self._item_payload(**overrides), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, msg=response.data)
        return response.data

    def _back_file(self, mother_number: int, registry_year: int = 2022, **overrides) -> dict:
        return self._create(
            registry_type=RegistryType.RED_INK,
            mother_number=mother_number,
            registry_year=registry_year,
            **overrides,
        )

    def _dispose(self, item_id, **overrides):
        payload = {
            "disposal_date": "2025-03-01",
            "disposal_reason": "Court order",
            "disposal_approved_by": "SP Office",
        }
        payload.update(overrides)
        return self.client.post(
            reverse("malkhana:item-dispose", args=[item_id]),
            payload,
            format="json",
        )

    def _assert_error(self, response, http_status: int, code: str) -> None:
        self.assertEqual(response.status_code, http_status, msg=response.data)
        self.assertEqual(response.data["code"], code)
        self.assertTrue(response.data["detail"])


class TestItemRegistration(MalkhanaAPITestBase):

    def test_black_ink_items_are_numbered_in_sequence(self):
        self._login_as(self.officer)

        first = self._create()
        second = self._create()

        self.assertEqual(first["mother_number"], f"{self.year}-00001")
        self.assertEqual(second["mother_number"], f"{self.year}-00002")
        self.assertEqual((first["registry_number"], second["registry_number"]), (1, 2))
        self.assertEqual(first["registry_type"], RegistryType.BLACK_INK)
        self.assertEqual(first["status"], ItemStatus.ACTIVE)
        self.assertEqual(first["unit_id"], str(self.station.pk))
        self.assertEqual(first["created_by"], self.officer.pk)
        self.assertEqual(first["red_ink_history"], [])

    def test_red_ink_back_filing_uses_supplied_numbers(self):
        self._login_as(self.officer)

        item = self._back_file(42, registry_year=2021)

        self.assertEqual(item["mother_number"], "2021-00042")
        self.assertEqual(item["registry_number"], 42)
        self.assertEqual(item["registry_year"], 2021)
        self.assertEqual(item["registry_type"], RegistryType.RED_INK)

    def test_red_ink_without_numbers_is_400(self):
        self._login_as(self.officer)

        response = self.client.post(
            self.items_url,
            self._item_payload(registry_type=RegistryType.RED_INK),
            format="json",
        )

        self._assert_error(response, status.HTTP_400_BAD_REQUEST, "validation_error")
        self.assertFalse(MalkhanaItem.objects.exists())

    def test_missing_required_field_is_400(self):
        self._login_as(self.officer)

        payload = self._item_payload()
        del payload["category"]
        response = self.client.post(self.items_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("category", response.data)

    def test_duplicate_mother_number_is_409(self):
        self._login_as(self.officer)
        self._back_file(7, registry_year=2020)

        self._login_as(self.other_officer)
        response = self.client.post(
            self.items_url,
            self._item_payload(registry_type=RegistryType.RED_INK, mother_number=7, registry_year=2020),
            format="json",
        )

        self._assert_error(response, status.HTTP_409_CONFLICT, "conflict")

    def test_admin_creates_in_named_unit(self):
        self._login_as(self.admin)

        item = self._create(unit_id=str(self.other_station.pk))

        self.assertEqual(item["unit_id"], str(self.other_station.pk))

    def test_admin_without_unit_id_is_400(self):
        self._login_as(self.admin)

        response = self.client.post(self.items_url, self._item_payload(), format="json")

        self._assert_error(response, status.HTTP_400_BAD_REQUEST, "validation_error")


class TestDisposalFlow(MalkhanaAPITestBase):

    def test_disposal_renumbers_red_ink_register(self):
        self._login_as(self.officer)
        items = [self._back_file(n) for n in (1, 2, 3, 4)]

        response = self._dispose(items[1]["id"])

        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        self.assertEqual(response.data["status"], ItemStatus.DISPOSED)
        self.assertEqual(response.data["registry_number"], 2)
        self.assertEqual(response.data["disposal_reason"], "Court order")

        register = self.client.get(reverse("malkhana:red-ink"))
        active = [
            (row["mother_number"], row["registry_number"], [h["red_ink_id"] for h in row["red_ink_history"]])
            for row in register.data
            if row["status"] == ItemStatus.ACTIVE
        ]
        self.assertEqual(
            active,
            [
                ("2022-00001", 1, []),
                ("2022-00003", 2, [3]),
                ("2022-00004", 3, [4]),
            ],
        )

    def test_second_disposal_is_422(self):
        self._login_as(self.officer)
        item = self._back_file(1)
        self.assertEqual(self._dispose(item["id"]).status_code, status.HTTP_200_OK)

        response = self._dispose(item["id"], disposal_reason="Again")

        self._assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY, "business_rule_violation")
        self.assertEqual(MalkhanaItem.objects.get(pk=item["id"]).disposal_reason, "Court order")

    def test_disposal_payload_is_validated(self):
        self._login_as(self.officer)
        item = self._create()

        response = self.client.post(
            reverse("malkhana:item-dispose", args=[item["id"]]),
            {"disposal_reason": "Court order"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("disposal_date", response.data)

    def test_patch_cannot_dispose(self):
        self._login_as(self.officer)
        item = self._create()

        response = self.client.patch(
            reverse("malkhana:item-detail", args=[item["id"]]),
            {"status": ItemStatus.DISPOSED},
            format="json",
        )

        self._assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY, "business_rule_violation")

    def test_patch_updates_descriptive_fields_only(self):
        self._login_as(self.officer)
        item = self._create()

        response = self.client.patch(
            reverse("malkhana:item-detail", args=[item["id"]]),
            {"notes": "Sent to FSL", "registry_number": 99},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        self.assertEqual(response.data["notes"], "Sent to FSL")
        self.assertEqual(response.data["registry_number"], item["registry_number"])


class TestYearTransitionFlow(MalkhanaAPITestBase):

    def test_closing_current_year_moves_black_ink_after_red_ink(self):
        self._login_as(self.officer)
        self._back_file(5, registry_year=2020)
        black = [self._create() for _ in range(3)]

        response = self.client.post(
            reverse("malkhana:year-transition"),
            {"new_year": self.year + 1},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        self.assertEqual(response.data["items_transitioned"], 3)
        self.assertEqual(response.data["previous_year"], self.year)
        self.assertTrue(response.data["success"])

        moved = MalkhanaItem.objects.filter(pk__in=[b["id"] for b in black]).order_by("registry_number")
        self.assertEqual([m.registry_number for m in moved], [6, 7, 8])
        self.assertTrue(all(m.registry_type == RegistryType.RED_INK for m in moved))
        self.assertEqual(self.client.get(reverse("malkhana:black-ink")).data, [])
        self.assertFalse(RedInkHistory.objects.exists())

    def test_future_year_is_400(self):
        self._login_as(self.officer)

        response = self.client.post(
            reverse("malkhana:year-transition"),
            {"new_year": self.year + 5},
            format="json",
        )

        self._assert_error(response, status.HTTP_400_BAD_REQUEST, "validation_error")

    def test_admin_must_name_unit(self):
        self._login_as(self.admin)
        url = reverse("malkhana:year-transition")

        missing = self.client.post(url, {"new_year": self.year}, format="json")
        named = self.client.post(
            url,
            {"new_year": self.year, "unit_id": str(self.station.pk)},
            format="json",
        )

        self._assert_error(missing, status.HTTP_400_BAD_REQUEST, "validation_error")
        self.assertEqual(named.status_code, status.HTTP_200_OK, msg=named.data)
        self.assertEqual(named.data["items_transitioned"], 0)


class TestRegisterQueries(MalkhanaAPITestBase):

    def test_black_ink_register_is_unit_scoped(self):
        self._login_as(self.officer)
        own = self._create()
        self._login_as(self.other_officer)
        self._create()

        self._login_as(self.officer)
        response = self.client.get(reverse("malkhana:black-ink"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row["id"] for row in response.data], [own["id"]])

    def test_stats(self):
        self._login_as(self.officer)
        self._create()
        disposed = self._create()
        self._back_file(1)
        self._dispose(disposed["id"])

        response = self.client.get(reverse("malkhana:stats"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data,
            {
                "total_items": 3,
                "black_ink_items": 2,
                "red_ink_items": 1,
                "disposed_items": 1,
                "recently_added_items": 3,
                "current_year": self.year,
            },
        )

    def test_search(self):
        self._login_as(self.officer)
        hit = self._create(description="Stolen motorcycle")
        self._create(description="Mobile phone")

        response = self.client.get(reverse("malkhana:search"), {"query": "MOTORCYCLE"})
        blank = self.client.get(reverse("malkhana:search"), {"query": ""})

        self.assertEqual([row["id"] for row in response.data], [hit["id"]])
        self.assertEqual(blank.data, [])

    def test_mother_number_lookup(self):
        self._login_as(self.officer)
        item = self._create()

        found = self.client.get(reverse("malkhana:mother-number", args=[item["mother_number"]]))
        missing = self.client.get(reverse("malkhana:mother-number", args=["1999-00001"]))

        self.assertEqual(found.status_code, status.HTTP_200_OK)
        self.assertEqual(found.data["id"], item["id"])
        self._assert_error(missing, status.HTTP_404_NOT_FOUND, "not_found")

    def test_other_units_item_is_403(self):
        self._login_as(self.other_officer)
        foreign = self._create()

        self._login_as(self.officer)
        detail = self.client.get(reverse("malkhana:item-detail", args=[foreign["id"]]))
        lookup = self.client.get(reverse("malkhana:mother-number", args=[foreign["mother_number"]]))

        self._assert_error(detail, status.HTTP_403_FORBIDDEN, "forbidden")
        self._assert_error(lookup, status.HTTP_403_FORBIDDEN, "forbidden")

    def test_unknown_item_is_404(self):
        self._login_as(self.officer)

        response = self.client.get(reverse("malkhana:item-detail", args=[uuid.uuid4()]))

        self._assert_error(response, status.HTTP_404_NOT_FOUND, "not_found")

    def test_admin_sees_every_unit(self):
        self._login_as(self.officer)
        self._back_file(1)
        self._login_as(self.other_officer)
        self._back_file(2)

        self._login_as(self.admin)
        response = self.client.get(reverse("malkhana:red-ink"))

        self.assertEqual(len(response.data), 2)


class TestAccessControl(MalkhanaAPITestBase):

    def test_unauthenticated_is_401(self):
        for url in (
            reverse("malkhana:stats"),
            reverse("malkhana:black-ink"),
            reverse("malkhana:shelf-list"),
        ):
            with self.subTest(url=url):
                self.assertEqual(self.client.get(url).status_code, status.HTTP_401_UNAUTHORIZED)

    def test_user_without_unit_is_403(self):
        self._login_as(self.unassigned)

        response = self.client.get(reverse("malkhana:stats"))

        self._assert_error(response, status.HTTP_403_FORBIDDEN, "forbidden")


class TestShelfFlow(MalkhanaAPITestBase):

    def _create_shelf(self, **overrides) -> dict:
        payload = {"name": "Rack A", "location": "Store Room 1", "category": "Weapons"}
        payload.update(overrides)
        response = self.client.post(reverse("malkhana:shelf-list"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, msg=response.data)
        return response.data

    def test_shelf_lifecycle(self):
        self._login_as(self.officer)
        shelf = self._create_shelf()
        self.assertEqual(shelf["unit_id"], str(self.station.pk))
        self.assertEqual(shelf["item_count"], 0)

        item = self._create(shelf_id=shelf["id"])
        self.assertEqual(item["shelf"]["id"], shelf["id"])

        listing = self.client.get(reverse("malkhana:shelf-list"))
        self.assertEqual([(s["id"], s["item_count"]) for s in listing.data], [(shelf["id"], 1)])

        contents = self.client.get(reverse("malkhana:shelf-items", args=[shelf["id"]]))
        self.assertEqual([row["id"] for row in contents.data], [item["id"]])

        blocked = self.client.delete(reverse("malkhana:shelf-detail", args=[shelf["id"]]))
        self._assert_error(blocked, status.HTTP_409_CONFLICT, "conflict")

        cleared = self.client.patch(
            reverse("malkhana:item-detail", args=[item["id"]]),
            {"shelf_id": None},
            format="json",
        )
        self.assertIsNone(cleared.data["shelf"])

        deleted = self.client.delete(reverse("malkhana:shelf-detail", args=[shelf["id"]]))
        self.assertEqual(deleted.status_code, status.HTTP_204_NO_CONTENT)

    def test_assign_to_other_units_shelf_is_403(self):
        self._login_as(self.other_officer)
        foreign_shelf = self._create_shelf()

        self._login_as(self.officer)
        item = self._create()
        response = self.client.post(
            reverse("malkhana:item-assign-shelf", args=[item["id"]]),
            {"shelf_id": foreign_shelf["id"]},
            format="json",
        )

        self._assert_error(response, status.HTTP_403_FORBIDDEN, "forbidden")

    def test_qr_codes(self):
        self._login_as(self.officer)
        shelf = self._create_shelf()
        item = self._create()

        with self.settings(MALKHANA={"QR_CODE_BASE_URL": "https://qr.example.org"}):
            item_qr = self.client.post(reverse("malkhana:item-qr-code", args=[item["id"]]))
            shelf_qr = self.client.post(reverse("malkhana:shelf-qr-code", args=[shelf["id"]]))

        self.assertEqual(item_qr.data["qr_code_url"], f"https://qr.example.org/item/{item['id']}")
        self.assertEqual(shelf_qr.data["qr_code_url"], f"https://qr.example.org/shelf/{shelf['id']}")
        self.assertEqual(
            self.client.get(reverse("malkhana:item-detail", args=[item["id"]])).data["qr_code_url"],
            item_qr.data["qr_code_url"],
        )
