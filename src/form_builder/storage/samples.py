"""Sample forms shown when no forms have been saved yet."""

from form_builder.models.form_schema import FormSchema

SAMPLE_FORMS: list[dict] = [
    {
        "id": "1",
        "name": "Contact Form",
        "fields": [
            {
                "id": "name",
                "type": "text",
                "label": "Full Name",
                "required": True,
                "validations": [{"type": "minLength", "value": "2"}],
            },
            {
                "id": "email",
                "type": "email",
                "label": "Email Address",
                "required": True,
                "validations": [{"type": "email", "value": ""}],
            },
            {
                "id": "message",
                "type": "textarea",
                "label": "Message",
                "required": True,
            },
        ],
    },
    {
        "id": "2",
        "name": "User Registration",
        "fields": [
            {
                "id": "username",
                "type": "text",
                "label": "Username",
                "required": True,
                "validations": [
                    {"type": "minLength", "value": "3"},
                    {"type": "maxLength", "value": "20"},
                ],
            },
            {
                "id": "password",
                "type": "password",
                "label": "Password",
                "required": True,
                "validations": [{"type": "password", "value": ""}],
            },
            {
                "id": "age",
                "type": "number",
                "label": "Age",
                "required": True,
            },
            {
                "id": "birthYear",
                "type": "derived",
                "label": "Birth Year",
                "parentFields": ["age"],
                "formula": "2024 - age",
                "readonly": True,
            },
        ],
    },
    {
        "id": "3",
        "name": "Feedback Survey",
        "fields": [
            {
                "id": "rating",
                "type": "select",
                "label": "How would you rate our service?",
                "required": True,
                "options": [
                    {"value": "5", "label": "Excellent"},
                    {"value": "4", "label": "Very Good"},
                    {"value": "3", "label": "Good"},
                    {"value": "2", "label": "Fair"},
                    {"value": "1", "label": "Poor"},
                ],
            },
            {
                "id": "recommend",
                "type": "radio",
                "label": "Would you recommend us to others?",
                "required": True,
                "options": [
                    {"value": "yes", "label": "Yes"},
                    {"value": "no", "label": "No"},
                    {"value": "maybe", "label": "Maybe"},
                ],
            },
            {
                "id": "newsletter",
                "type": "checkbox",
                "label": "Subscribe to newsletter",
            },
        ],
    },
]


def sample_forms() -> list[FormSchema]:
    """Fresh copies of the sample forms."""
    return [FormSchema.model_validate(form) for form in SAMPLE_FORMS]
