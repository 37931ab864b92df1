"""
Smoke-test client for a running LockIn API server
"""
import json
import requests
import time
from typing import Dict, Any, List
import logging


class ChatApiTestClient:
    """Test client for the LockIn chat API"""

    def __init__(self, base_url: str = "http://localhost:5000", user_id: str = None):
        self.base_url = base_url
        self.headers = {'Content-Type': 'application/json'}
        if user_id:
            self.headers['X-User-Id'] = user_id
        self.logger = logging.getLogger(__name__)

    def check_health(self) -> bool:
        """Test health check endpoint"""
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

    def send_message(self, message: str, conversation_id: str = None) -> Dict[str, Any]:
        """Send chat message and return response"""
        try:
            start_time = time.time()

            response = requests.post(
                f"{self.base_url}/chat",
                json={"message": message, "conversationId": conversation_id},
                timeout=60,
                headers=self.headers
            )

            response_time = time.time() - start_time

            if response.status_code == 200:
                self.logger.info(f"Message successful (RT: {response_time:.2f}s)")
                return {
                    "success": True,
                    "data": response.json(),
                    "response_time": response_time,
                    "status_code": response.status_code
                }
            self.logger.error(f"Message failed: {response.status_code}")
            return {
                "success": False,
                "error": f"HTTP {response.status_code}",
                "response_time": response_time,
                "status_code": response.status_code
            }

        except requests.exceptions.Timeout:
            self.logger.error("Request timeout")
            return {"success": False, "error": "timeout"}
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Request error: {e}")
            return {"success": False, "error": str(e)}

    def validate_chat_response(self, response_data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate /chat response format"""
        validation_result = {"valid": True, "errors": []}

        expected_types = {
            "success": bool,
            "message": str,
            "conversationId": str,
            "eventsCreated": bool,
        }
        for field, expected_type in expected_types.items():
            if field not in response_data:
                validation_result["errors"].append(f"Missing required field: {field}")
            elif not isinstance(response_data[field], expected_type):
                validation_result["errors"].append(f"Field {field} must be {expected_type.__name__}")

        validation_result["valid"] = not validation_result["errors"]
        return validation_result

    def check_event_order(self) -> bool:
        """Verify GET /events is sorted by start time"""
        response = requests.get(f"{self.base_url}/events", headers=self.headers, timeout=10)
        if response.status_code != 200:
            self.logger.error(f"Event listing failed: {response.status_code}")
            return False
        starts = [event["startTime"] for event in response.json()]
        return starts == sorted(starts)

    def run_test_suite(self, messages: List[str] = None) -> Dict[str, Any]:
        """Run one conversation through the server and validate every reply"""
        results = {
            "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
            "health_check": self.check_health(),
            "tests": [],
            "summary": {"total": 0, "passed": 0, "failed": 0, "avg_response_time": 0}
        }

        messages = messages or [
            "Book gym Monday 6-7pm",
            "Also add a team standup every weekday at 9am for 15 minutes next week",
            "What do I have scheduled?",
        ]

        conversation_id = None
        total_response_time = 0

        for i, message in enumerate(messages):
            self.logger.info(f"Running message {i+1}/{len(messages)}")
            response = self.send_message(message, conversation_id)

            test_result = {
                "test_id": i + 1,
                "message": message,
                "success": response.get("success", False),
                "response_time": response.get("response_time", 0),
            }

            if response.get("success"):
                validation = self.validate_chat_response(response["data"])
                test_result["validation"] = validation
                test_result["success"] = validation["valid"]
                conversation_id = response["data"].get("conversationId", conversation_id)
            else:
                test_result["error"] = response.get("error", "Unknown error")

            results["summary"]["passed" if test_result["success"] else "failed"] += 1
            total_response_time += response.get("response_time", 0)
            results["tests"].append(test_result)
            results["summary"]["total"] += 1

        results["event_order_ok"] = self.check_event_order()

        if results["summary"]["total"] > 0:
            results["summary"]["avg_response_time"] = total_response_time / results["summary"]["total"]

        return results


def main():
    """Main test execution"""
    import argparse

    parser = argparse.ArgumentParser(description='LockIn API Smoke Test Client')
    parser.add_argument('--url', default='http://localhost:5000', help='API base URL')
    parser.add_argument('--user', help='Value for the X-User-Id header')
    parser.add_argument('--output', help='Output file for test results')
    parser.add_argument('--verbose', action='store_true', help='Verbose logging')

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format='%(asctime)s - %(levelname)s - %(message)s')

    client = ChatApiTestClient(args.url, user_id=args.user)

    print(f"Running smoke tests against {args.url}")
    results = client.run_test_suite()

    summary = results["summary"]
    print(f"\nTest Results:")
    print(f"  Total messages: {summary['total']}")
    print(f"  Passed: {summary['passed']}")
    print(f"  Failed: {summary['failed']}")
    print(f"  Average response time: {summary['avg_response_time']:.2f}s")
    print(f"  Health check: {'✓' if results['health_check'] else '✗'}")
    print(f"  Event order: {'✓' if results['event_order_ok'] else '✗'}")

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(results, f, indent=2)
        print(f"\nDetailed results saved to: {args.output}")


if __name__ == '__main__':
    main()
