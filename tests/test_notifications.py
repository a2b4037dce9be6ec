import smtplib

from shopfront.app.extensions import mail


def test_send_email_form_renders(client):
    r = client.get("/send-email")
    assert r.status_code == 200
    assert b'name="subject"' in r.data


def test_send_email_success(app, client):
    with mail.record_messages() as outbox:
        r = client.post(
            "/send-email",
            data={"email": "buyer@example.com", "subject": "Hello", "message": "Your order shipped."},
        )

    assert r.status_code == 200
    assert r.get_data(as_text=True) == "Email sent successfully"
    assert len(outbox) == 1
    msg = outbox[0]
    assert msg.recipients == ["buyer@example.com"]
    assert msg.subject == "Hello"
    assert msg.body == "Your order shipped."
    assert msg.sender == "shop@example.com"


def test_send_email_accepts_json(client):
    with mail.record_messages() as outbox:
        r = client.post("/send-email", json={"email": "a@b.co", "subject": "Hi", "message": "x"})
    assert r.status_code == 200
    assert outbox[0].recipients == ["a@b.co"]


def test_send_email_transport_failure(client, monkeypatch):
    def refuse(message):
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials for shop@example.com")

    monkeypatch.setattr(mail, "send", refuse)

    r = client.post("/send-email", data={"email": "buyer@example.com", "subject": "Hello", "message": "Hi"})

    assert r.status_code == 500
    assert r.get_data(as_text=True) == "Error sending email"
