"""
Record actions and forms known to every customer, plus record-type resolution.
"""

RECORD_ACTIONS = [
    {"key": "get-leads", "name": "Leads", "type": "default"},
    {
        "key": "get-AI_Engagement_Conversation__c",
        "name": "AI Engagement Conversation",
        "type": "default",
    },
]

DEFAULT_FORMS = [
    {"formId": "leads", "formTitle": "Leads", "type": "default"},
    {
        "formId": "AI_Engagement_Conversation__c",
        "formTitle": "AI Engagement Conversation",
        "type": "default",
    },
]

ACTION_PREFIX = "get-"
OBJECTS_ACTION = "get-objects"


def default_form_types() -> list[str]:
    """Form ids of the default record actions (action key without the get- prefix)."""
    return [
        a["key"][len(ACTION_PREFIX):]
        for a in RECORD_ACTIONS
        if a["type"] == "default" and a["key"].startswith(ACTION_PREFIX)
    ]


def form_id_from_action(action: str) -> str | None:
    if action.startswith(ACTION_PREFIX):
        return action[len(ACTION_PREFIX):]
    return None


def is_custom_form_action(action: str) -> bool:
    """get-<formId> where formId is not one of the default forms."""
    if action == OBJECTS_ACTION:
        return False
    form_id = form_id_from_action(action)
    return bool(form_id) and form_id not in default_form_types()


def requires_instance_key(action: str) -> bool:
    return action == OBJECTS_ACTION or is_custom_form_action(action)


def resolve_record_type(action: str, instance_key: str | None) -> str:
    """Record type stored with imported records and used to list them."""
    if requires_instance_key(action) and instance_key:
        return instance_key
    return action


def default_form_title(form_id: str) -> str | None:
    for form in DEFAULT_FORMS:
        if form["formId"] == form_id:
            return form["formTitle"]
    return None
