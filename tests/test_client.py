"""
Smoke-test client for a running Fair Slot Finder API
"""
import json
import requests
import time
from typing import Dict, Any
import logging

class SlotFinderSmokeClient:
    """Exercises the HTTP API of a live server"""

    def __init__(self, base_url: str = "http://localhost:5000"):
        self.base_url = base_url
        self.logger = logging.getLogger(__name__)

    def check_health(self) -> bool:
        try:
            response = requests.get(f"{self.base_url}/health", timeout=5)
            if response.status_code == 200:
                self.logger.info("Health check passed")
                return True
            self.logger.error(f"Health check failed: {response.status_code}")
            return False
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Health check error: {e}")
            return False

    def post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST a payload and return status, body and response time"""
        start_time = time.time()
        try:
            response = requests.post(
                f"{self.base_url}{endpoint}",
                json=payload,
                timeout=30,
                headers={'Content-Type': 'application/json'}
            )
        except requests.exceptions.Timeout:
            self.logger.error("Request timeout")
            return {"success": False, "error": "timeout"}
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Request error: {e}")
            return {"success": False, "error": str(e)}

        return {
            "success": response.status_code == 200,
            "status_code": response.status_code,
            "data": response.json(),
            "response_time": time.time() - start_time,
        }

    def validate_availability_response(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Check the shape of an /availability response"""
        validation_result = {"valid": True, "errors": []}

        for field in ("slots", "searchStart", "searchEnd", "rejections", "capped"):
            if field not in data:
                validation_result["errors"].append(f"Missing field: {field}")
                validation_result["valid"] = False

        for i, slot in enumerate(data.get("slots", [])):
            if slot.get("summaryStatus") not in ("ideal", "flex"):
                validation_result["errors"].append(f"Slot {i} has invalid summaryStatus")
                validation_result["valid"] = False
            if any(p.get("status") == "outside" for p in slot.get("participants", [])):
                validation_result["errors"].append(f"Slot {i} has a participant outside hours")
                validation_result["valid"] = False
            if not all(g.get("withinHours") for g in slot.get("guardrails", [])):
                validation_result["errors"].append(f"Slot {i} breaks a guardrail")
                validation_result["valid"] = False

        return validation_result

    def run_smoke_suite(self, config_file: str = None) -> Dict[str, Any]:
        """Health, search, then summarize the first two slots"""
        results = {
            "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
            "health_check": self.check_health(),
            "availability": None,
            "summary": None,
        }

        config = self._load_config(config_file)

        search = self.post("/availability", {"config": config})
        if search.get("success"):
            search["validation"] = self.validate_availability_response(search["data"])
        results["availability"] = search

        slots = (search.get("data") or {}).get("slots", [])[:2]
        if slots:
            results["summary"] = self.post("/summary", {
                "config": config,
                "slots": [{"start": slot["start"], "end": slot["end"]} for slot in slots],
            })

        return results

    def _load_config(self, config_file: str = None) -> Dict[str, Any]:
        if config_file:
            with open(config_file, 'r') as f:
                return json.load(f)

        return {
            "meetingPurpose": "Quarterly planning",
            "duration": 60,
            "searchWindowDays": 7,
            "participants": [
                {"displayName": "Host", "email": "host@example.com", "timezone": "America/Los_Angeles",
                 "startHour": "09:00", "endHour": "17:00", "role": "host", "sendInvite": True},
                {"displayName": "London", "email": "london@example.com", "timezone": "Europe/London",
                 "startHour": "09:00", "endHour": "17:00", "role": "required", "flexibleHours": True},
            ],
            "respectedTimezones": [],
        }

def main():
    """Main smoke test execution"""
    import argparse

    parser = argparse.ArgumentParser(description='Fair Slot Finder smoke client')
    parser.add_argument('--url', default='http://localhost:5000', help='API base URL')
    parser.add_argument('--config', help='Configuration JSON file')
    parser.add_argument('--output', help='Output file for results')
    parser.add_argument('--verbose', action='store_true', help='Verbose logging')

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format='%(asctime)s - %(levelname)s - %(message)s')

    client = SlotFinderSmokeClient(args.url)
    results = client.run_smoke_suite(args.config)

    availability = results["availability"] or {}
    print(f"Health check: {'✓' if results['health_check'] else '✗'}")
    print(f"Availability: {'✓' if availability.get('success') else '✗'} "
          f"({len((availability.get('data') or {}).get('slots', []))} slots)")
    print(f"Summary: {'✓' if (results['summary'] or {}).get('success') else '-'}")

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(results, f, indent=2)
        print(f"\nDetailed results saved to: {args.output}")

if __name__ == '__main__':
    main()
