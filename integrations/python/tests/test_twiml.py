import io

import pytest

from voicehook_core.twiml import (
    Beep,
    Conference,
    ConferenceEvent,
    Dial,
    Gather,
    Method,
    Number,
    Redirect,
    Response,
    Say,
    Voice,
)

HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'

DIAL_THEN_SAY = HEADER + """<Response>
  <Dial>
    <Number>810-730-3842</Number>
  </Dial>
  <Say>Failed to connect</Say>
</Response>"""


def test_render_from_constructors():
    response = Response(verbs=[Dial(verbs=[Number("810-730-3842")]), Say("Failed to connect")])
    assert response.render().decode() == DIAL_THEN_SAY


def test_render_from_chained_builders():
    response = Response().dial(Dial().number(Number("810-730-3842"))).say(Say("Failed to connect"))
    assert response.render().decode() == DIAL_THEN_SAY


def test_render_gather_menu():
    response = (
        Response()
        .gather(
            Gather()
            .set_action("%s")
            .set_method(Method.POST)
            .set_timeout(10)
            .set_input("dtmf")
            .say(Voice.ALICE.say("Welcome to patch conferencing"))
            .pause(1)
            .say(Voice.ALICE.say("Please enter your access code, followed by the pound sign"))
        )
        .say(Voice.ALICE.say("We did not hear a selection"))
        .pause(1)
        .redirect(Redirect("%s").set_method(Method.POST))
    )

    assert response.render().decode() == HEADER + """<Response>
  <Gather input="dtmf" action="%s" method="POST" timeout="10">
    <Say voice="alice">Welcome to patch conferencing</Say>
    <Pause length="1"></Pause>
    <Say voice="alice">Please enter your access code, followed by the pound sign</Say>
  </Gather>
  <Say voice="alice">We did not hear a selection</Say>
  <Pause length="1"></Pause>
  <Redirect method="POST">%s</Redirect>
</Response>"""


def test_render_is_repeatable():
    response = Response().say(Say("hi"))
    assert response.render() == response.render()


def test_text_is_escaped():
    rendered = Response().say(Say("Tom & Jerry <3")).render().decode()
    assert "<Say>Tom &amp; Jerry &lt;3</Say>" in rendered


def test_explicit_empty_finish_on_key_is_written():
    gather = Gather(finish_on_key="")
    assert Response().gather(gather).render().decode().endswith(
        '<Response>\n  <Gather finishOnKey=""></Gather>\n</Response>'
    )


def test_conference_attributes():
    conference = Conference("room-1").set(
        beep=Beep.ON_ENTER,
        start_conference_on_enter=False,
        wait_url="",
        max_participants=5,
        status_callback_event=ConferenceEvent.JOIN | ConferenceEvent.START | ConferenceEvent.SPEAKER,
        status_callback="https://example.com/events",
        status_callback_method=Method.POST,
    )
    rendered = Response().dial(Dial(action="/after", timeout=20).conference(conference)).render().decode()

    assert '<Dial action="/after" timeout="20">' in rendered
    assert (
        '<Conference beep="onEnter" startConferenceOnEnter="false" waitUrl="" maxParticipants="5" '
        'statusCallbackEvent="start join speaker" statusCallback="https://example.com/events" '
        'statusCallbackMethod="POST">room-1</Conference>'
    ) in rendered


def test_conference_rejects_unknown_attribute():
    with pytest.raises(AttributeError):
        Conference("room").set(colour="blue")


def test_conference_event_tokens():
    assert ConferenceEvent.END.tokens() == "end"
    assert (ConferenceEvent.HOLD | ConferenceEvent.MUTE | ConferenceEvent.LEAVE).tokens() == "leave mute hold"


def test_say_voice_and_loop():
    say = Say("hello", loop=2).set_voice(Voice.POLLY_MATTHEW)
    assert '<Say voice="Polly.Matthew" loop="2">hello</Say>' in Response().say(say).render().decode()


def test_render_to_stream():
    stream = io.BytesIO()
    response = Response().say(Say("hi"))
    response.render_to(stream)
    assert stream.getvalue() == response.render()
