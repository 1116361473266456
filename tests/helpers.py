"""Template inspection helpers."""

import json


def policy_statements(template):
    """Return the statements of the single bucket policy in a template."""
    policies = template.find_resources("AWS::S3::BucketPolicy")
    assert len(policies) == 1
    (policy,) = policies.values()
    return policy["Properties"]["PolicyDocument"]["Statement"]


def policy_sids(template):
    """Return the Sids of bucket policy statements that have one, in order."""
    return [s["Sid"] for s in policy_statements(template) if "Sid" in s]


def logged_events(caplog, level=None):
    """Return structured events captured by caplog, optionally filtered by level."""
    events = []
    for record in caplog.records:
        if level is not None and record.levelno != level:
            continue
        message = record.getMessage()
        if message.startswith("{") and '"eventType"' in message:
            events.append(json.loads(message))
    return events
