# chatbot/tests/test_engine.py

from types import SimpleNamespace

from django.test import SimpleTestCase

from chatbot.services import engine


def bot(context, content=""):
    return SimpleNamespace(message_type="BOT", content=content, context=context)


def user(content):
    return SimpleNamespace(message_type="USER", content=content, context="")


class KeywordReplyTests(SimpleTestCase):
    """
    GUARANTEES:
    - Keywords are matched case-insensitively, first group wins
    - Pricing and product questions flag the need for a human
    - Unknown input gets the default reply
    """

    def test_greeting(self):
        result = engine.reply("Bonjour !")
        self.assertEqual(result.text, engine.GREETING_REPLY)
        self.assertFalse(result.needs_human_support)
        self.assertEqual(result.context, engine.CTX_INITIAL)

    def test_products(self):
        result = engine.reply("Quelles SOLUTIONS proposez-vous ?")
        self.assertEqual(result.text, engine.PRODUCTS_REPLY)
        self.assertEqual(result.context, engine.CTX_INFO_PRODUCTS)

    def test_pricing_needs_human(self):
        result = engine.reply("Quels sont vos tarifs ?")
        self.assertEqual(result.text, engine.PRICING_REPLY)
        self.assertTrue(result.needs_human_support)
        self.assertEqual(result.context, engine.CTX_INFO_PRICING)

    def test_contact_request_asks_email(self):
        result = engine.reply("Je voudrais parler à un conseiller")
        self.assertEqual(result.text, engine.ASK_EMAIL)
        self.assertEqual(result.context, engine.CTX_ASKING_EMAIL)

    def test_default(self):
        result = engine.reply("abracadabra")
        self.assertEqual(result.text, engine.DEFAULT_REPLY)
        self.assertFalse(result.needs_human_support)
        self.assertFalse(result.ready_to_submit)


class CollectionFlowTests(SimpleTestCase):
    """
    GUARANTEES:
    - The context of the last BOT message drives the next step
    - email → subject → message, each validated, ends ready_to_submit
    - Collected data is rebuilt from the history
    """

    def test_valid_email_moves_to_subject(self):
        result = engine.reply("ADA@Example.com", [bot(engine.CTX_ASKING_EMAIL)])
        self.assertEqual(result.context, engine.CTX_ASKING_SUBJECT)
        self.assertEqual(result.collected, {"email": "ada@example.com"})

    def test_invalid_email_asks_again(self):
        result = engine.reply("pas un email", [bot(engine.CTX_ASKING_EMAIL)])
        self.assertEqual(result.text, engine.EMAIL_INVALID)
        self.assertEqual(result.context, engine.CTX_ASKING_EMAIL)

    def test_yes_while_asking_email(self):
        result = engine.reply("oui", [bot(engine.CTX_ASKING_EMAIL)])
        self.assertEqual(result.text, engine.EMAIL_STILL_NEEDED)

    def test_short_subject(self):
        result = engine.reply("a", [bot(engine.CTX_ASKING_SUBJECT)])
        self.assertEqual(result.text, engine.SUBJECT_TOO_SHORT)
        self.assertEqual(result.context, engine.CTX_ASKING_SUBJECT)

    def test_short_message(self):
        result = engine.reply("ok", [bot(engine.CTX_ASKING_MESSAGE)])
        self.assertEqual(result.text, engine.MESSAGE_TOO_SHORT)

    def test_full_flow_ready_to_submit(self):
        history = [
            bot(engine.CTX_ASKING_EMAIL),
            user("ada@example.com"),
            bot(engine.CTX_ASKING_SUBJECT),
            user("Devis SOC"),
            bot(engine.CTX_ASKING_MESSAGE),
        ]
        result = engine.reply("Je souhaite un devis pour un SOC managé.", history)

        self.assertTrue(result.ready_to_submit)
        self.assertEqual(
            result.collected,
            {
                "email": "ada@example.com",
                "subject": "Devis SOC",
                "message": "Je souhaite un devis pour un SOC managé.",
            },
        )
        self.assertIn('concernant "Devis SOC"', result.text)
        self.assertIn("ada@example.com", result.text)

    def test_follow_up_after_product_info(self):
        result = engine.reply("oui", [bot(engine.CTX_INFO_PRODUCTS, engine.PRODUCTS_REPLY)])
        self.assertEqual(result.text, engine.ASK_EMAIL_AFTER_INFO)
        self.assertEqual(result.context, engine.CTX_ASKING_EMAIL)

    def test_yes_after_handoff_offer(self):
        result = engine.reply("oui", [bot(engine.CTX_INFO_PRICING, engine.PRICING_REPLY)])
        self.assertEqual(result.text, engine.ASK_EMAIL_AFTER_YES)

    def test_yes_without_offer(self):
        result = engine.reply("oui", [bot(engine.CTX_INITIAL, engine.GREETING_REPLY)])
        self.assertEqual(result.text, engine.AFFIRMATIVE_REPLY)

    def test_admin_messages_do_not_change_context(self):
        history = [
            bot(engine.CTX_ASKING_EMAIL),
            SimpleNamespace(message_type="ADMIN", content="Bonjour", context=""),
        ]
        self.assertEqual(engine.current_context(history), engine.CTX_ASKING_EMAIL)
