import unittest

from pydantic import ValidationError

from city_weather.ingestion.models import WeatherRecord
from city_weather.tests.conftest import make_payload


class TestWeatherRecord(unittest.TestCase):
    def test_unknown_fields_are_ignored(self) -> None:
        payload = make_payload()
        payload["current"]["brand_new_metric"] = 42
        payload["location"]["population"] = 9_000_000

        rec = WeatherRecord.from_payload(payload)

        self.assertEqual(rec.location.name, "London")
        self.assertEqual(rec.current.condition.code, 1183)
        self.assertAlmostEqual(rec.current.temp_c, 11.2)
        doc = rec.to_document()
        self.assertNotIn("air_quality", doc)
        self.assertNotIn("brand_new_metric", doc["current"])
        self.assertNotIn("windchill_c", doc["current"])

    def test_upstream_id_and_city_are_not_trusted(self) -> None:
        payload = make_payload()
        payload["id"] = "upstream-id"
        payload["city"] = "Somewhere Else"

        rec = WeatherRecord.from_payload(payload)

        self.assertIsNone(rec.id)
        self.assertIsNone(rec.city)

    def test_document_shape(self) -> None:
        rec = WeatherRecord.from_payload(make_payload())
        rec.id = "abc"
        rec.city = "London"

        doc = rec.to_document()
        self.assertEqual(set(doc), {"id", "city", "location", "current"})
        self.assertEqual(doc["current"]["condition"]["text"], "Light rain")
        self.assertEqual(doc["location"]["tz_id"], "Europe/London")

    def test_missing_current_block_raises(self) -> None:
        payload = make_payload()
        del payload["current"]
        with self.assertRaises(ValidationError):
            WeatherRecord.from_payload(payload)

    def test_non_object_payload_raises(self) -> None:
        with self.assertRaises(ValidationError):
            WeatherRecord.from_payload(["not", "an", "object"])


if __name__ == "__main__":
    unittest.main()
