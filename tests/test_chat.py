from legallens.qa.chat import CHAT_FALLBACK, ChatAssistant, build_clause_context, offline_answer
from legallens.utils.config import AppConfig
from legallens.utils.types import ChatTurn, Clause, Document


def sample_document():
    clause = Clause(id="clause-1", original_text="Either party may terminate on 30 days notice.",
                    category="Termination", explanation="You can leave with a month's notice.",
                    risk_level="low", key_points=("30 days notice",), risks=())
    return Document(id="doc-1", raw_text=clause.original_text, clauses=(clause,))


class RecordingLLM:
    def __init__(self, reply="You may terminate with 30 days notice."):
        self.reply = reply
        self.calls = []

    def chat(self, system_prompt, messages):
        self.calls.append((system_prompt, messages))
        return self.reply

    def generate(self, prompt):
        self.calls.append(prompt)
        return self.reply


class BrokenLLM:
    def chat(self, system_prompt, messages):
        raise TimeoutError("deadline exceeded")

    def generate(self, prompt):
        raise TimeoutError("deadline exceeded")


def assistant(llm, **overrides):
    return ChatAssistant(AppConfig(use_gemini=False, **overrides), llm=llm)


def test_context_lists_every_clause():
    context = build_clause_context(sample_document())
    assert "- Termination: You can leave with a month's notice." in context
    assert 'Original text: "Either party may terminate on 30 days notice."' in context
    assert "Key points: 30 days notice" in context
    assert "Risks: None" in context


def test_reply_sends_recent_history_and_question():
    llm = RecordingLLM()
    history = [ChatTurn(role="user" if i % 2 == 0 else "assistant", content=f"turn {i}") for i in range(14)]
    out = assistant(llm).reply("Can I leave early?", sample_document(), history)
    assert out == "You may terminate with 30 days notice."
    system_prompt, messages = llm.calls[0]
    assert "Termination" in system_prompt
    assert len(messages) == 11
    assert messages[0]["content"] == "turn 4"
    assert messages[-1] == {"role": "user", "content": "Can I leave early?"}


def test_reply_failure_returns_apology():
    assert assistant(BrokenLLM()).reply("Hello?", sample_document()) == CHAT_FALLBACK


def test_empty_model_reply_returns_apology():
    assert assistant(RecordingLLM(reply="  ")).reply("Hello?", sample_document()) == CHAT_FALLBACK


def test_reply_without_model_returns_apology():
    assert assistant(None).reply("Hello?", sample_document()) == CHAT_FALLBACK


def test_answer_uses_raw_document_text():
    llm = RecordingLLM(reply="It is a termination clause.")
    out = assistant(llm).answer("What does it say?", sample_document())
    assert out == "It is a termination clause."
    assert "Either party may terminate" in llm.calls[0]
    assert "Question: What does it say?" in llm.calls[0]


def test_answer_failure_uses_offline_reply():
    out = assistant(BrokenLLM()).answer("Give me a summary", sample_document())
    assert out == offline_answer("Give me a summary")
    assert "summary" in out


def test_offline_answers_by_keyword():
    assert "legal document" in offline_answer("What is this document?")
    assert offline_answer("anything else") != offline_answer("summary please")


def test_history_never_opens_with_assistant_turn():
    llm = RecordingLLM()
    history = [ChatTurn(role="assistant" if i % 2 == 0 else "user", content=f"turn {i}") for i in range(6)]
    assistant(llm, chat_history_limit=4).reply("And the fees?", sample_document(), history)
    _, messages = llm.calls[0]
    assert messages[0] == {"role": "user", "content": "turn 3"}
    assert [m["role"] for m in messages] == ["user", "assistant", "user", "user"]
    assert messages[-1]["content"] == "And the fees?"


def test_assistant_only_history_is_dropped():
    llm = RecordingLLM()
    assistant(llm).reply("Hi", sample_document(), [ChatTurn(role="assistant", content="Welcome")])
    _, messages = llm.calls[0]
    assert messages == [{"role": "user", "content": "Hi"}]
