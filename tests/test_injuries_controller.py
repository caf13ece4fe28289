import unittest

from fakes import FakeTransport

from academy_client.controllers.injuries import InjuriesController
from academy_client.services.injury_service import InjuryService, map_injury_type, map_severity
from academy_client.utils.resource import IDLE, Error, Success


def injury(injury_id, status="surveille", **extra):
    payload = {
        "_id": injury_id,
        "type": "muscle",
        "severity": "medium",
        "description": "hamstring",
        "status": status,
        "playerId": {"_id": "p1", "nom": "Doe", "prenom": "John"},
        "evolutions": [],
        "recommendations": [],
        "createdAt": "2024-02-01T08:00:00.000Z",
    }
    payload.update(extra)
    return payload


class LabelMappingTests(unittest.TestCase):
    def test_known_labels(self):
        self.assertEqual(map_injury_type("Déchirure musculaire"), "muscle")
        self.assertEqual(map_injury_type("Entorse"), "articulation")
        self.assertEqual(map_severity("Très grave"), "severe")

    def test_unknown_labels_fall_back(self):
        self.assertEqual(map_injury_type("Crampe"), "other")
        self.assertEqual(map_severity(""), "medium")


class InjuriesControllerTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.transport = FakeTransport()
        self.controller = InjuriesController(InjuryService(self.transport))

    async def test_loads_decode_populated_players(self):
        self.transport.reply("GET", "injury/my", [injury("i1")])
        injuries = await self.controller.load_my_injuries()
        self.assertEqual(injuries[0].player_id, "p1")
        self.assertIsNone(injuries[0].last_evolution)

    async def test_create_maps_labels_and_reloads(self):
        self.transport.reply("POST", "injury", injury("i2"))
        self.transport.reply("GET", "injury/my", [injury("i1"), injury("i2")])

        created = await self.controller.create_injury("Contusion", "Grave", "knee")

        self.assertEqual(created.id, "i2")
        self.assertEqual(self.transport.calls[0][2], {"type": "choc", "severity": "severe", "description": "knee"})
        self.assertEqual([i.id for i in self.controller.my_injuries.current_value()], ["i1", "i2"])

    async def test_create_failure_reports_and_skips_reload(self):
        self.transport.fail("POST", "injury", 401, "Unauthorized")
        self.assertIsNone(await self.controller.create_injury("Fracture", "Légère", "wrist"))
        self.assertEqual(self.controller.create_state.get_state(), Error("HTTP 401: Unauthorized"))
        self.assertEqual(len(self.transport.calls), 1)

        self.controller.reset_create_state()
        self.assertEqual(self.controller.create_state.get_state(), IDLE)

    async def test_evolution_is_merged_into_loaded_lists(self):
        self.transport.reply("GET", "injury/academy/a1", [injury("i1"), injury("i3")])
        await self.controller.load_academy_injuries("a1")
        evolved = injury("i1", evolutions=[{"date": "2024-02-02T08:00:00.000Z", "painLevel": 4, "note": "better"}])
        self.transport.reply("POST", "injury/i1/evolution", evolved)

        await self.controller.add_evolution("i1", 4, "better")

        self.assertEqual(self.transport.calls[-1][2], {"painLevel": 4, "note": "better"})
        first = self.controller.academy_injuries.current_value()[0]
        self.assertEqual(first.last_evolution.pain_level, 4)
        self.assertEqual(len(self.controller.academy_injuries.current_value()), 2)

    async def test_out_of_range_pain_level_never_reaches_the_server(self):
        await self.controller.add_evolution("i1", 11, "ouch")
        self.assertIsInstance(self.controller.add_evolution_state.get_state(), Error)
        self.assertEqual(self.transport.calls, [])

    async def test_status_change_moves_players_in_and_out_of_unavailable(self):
        self.transport.reply("GET", "injury/unavailable", [injury("i1", status="indisponible")])
        await self.controller.load_unavailable_players()

        self.transport.reply("PATCH", "injury/i2/status", injury("i2", status="indisponible"))
        await self.controller.update_status("i2", "indisponible")
        self.assertEqual([i.id for i in self.controller.unavailable_players.current_value()], ["i1", "i2"])

        self.transport.reply("PATCH", "injury/i1/status", injury("i1", status="apte"))
        await self.controller.update_status("i1", "apte")
        self.assertEqual([i.id for i in self.controller.unavailable_players.current_value()], ["i2"])
        self.assertIsInstance(self.controller.update_status_state.get_state(), Success)

    async def test_recommendation(self):
        self.transport.reply("PATCH", "injury/i1/recommendations", injury("i1", recommendations=["rest"]))
        updated = await self.controller.add_recommendation("i1", "rest")
        self.assertEqual(updated.recommendations, ["rest"])
        self.assertEqual(self.transport.calls[0][2], {"recommendation": "rest"})


if __name__ == "__main__":
    unittest.main()
