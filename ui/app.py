import os
from datetime import date, timedelta

import httpx
import streamlit as st

API_BASE = os.getenv("API_BASE_URL", "http://localhost:3000").rstrip("/")
LANGUAGES = ["none", "French", "Spanish", "German", "Hindi", "Arabic", "Chinese", "Japanese"]

st.set_page_config(page_title="EDU AI Lab", layout="wide")
st.title("🎓 EDU AI Lab")
st.caption("Summaries, quizzes, flashcards, mind maps, study plans and a little motivation.")


def show_result(r: httpx.Response, key: str, as_code: bool = False) -> None:
    if r.status_code != 200:
        st.error(f"Request failed (HTTP {r.status_code})")
        st.json(r.json() if r.headers.get("content-type", "").startswith("application/json") else {"raw": r.text})
        return
    text = r.json().get(key, "")
    if not text:
        st.warning("The model returned an empty answer.")
    elif as_code:
        st.code(text, language="mermaid")
    else:
        st.markdown(text)


def post_json(path: str, payload: dict, timeout: float = 180.0) -> httpx.Response:
    with httpx.Client(timeout=timeout) as c:
        return c.post(f"{API_BASE}{path}", json=payload)


left, right = st.columns([1, 2], gap="large")

with left:
    st.subheader("Service Status")
    if st.button("🔄 Refresh health"):
        st.session_state.pop("health", None)

    if "health" not in st.session_state:
        try:
            with httpx.Client(timeout=5.0) as c:
                r = c.get(f"{API_BASE}/health")
                st.session_state.health = (r.status_code, r.json())
        except Exception as e:
            st.session_state.health = (None, {"error": str(e)})

    code, data = st.session_state.health
    if code == 200 and data.get("status") == "ok":
        st.success("Healthy ✅")
    elif code is None:
        st.error("UI can't reach API ❌")
    else:
        st.warning("Degraded ⚠️ (is GEMINI_API_KEY set?)")

    st.write("API Base:", API_BASE)
    st.json(data)

    st.divider()
    language = st.selectbox("Also translate answers into", LANGUAGES)

with right:
    summary_tab, quiz_tab, cards_tab, mindmap_tab, plan_tab, motivation_tab = st.tabs(
        ["Summary", "Quiz", "Flashcards", "Mind map", "Study plan", "Motivation"]
    )

    with summary_tab:
        text = st.text_area("Study material", height=200, key="summary_text")
        if st.button("📝 Summarize text"):
            try:
                show_result(post_json("/summarize-text", {"text": text, "language": language}), "summary")
            except Exception as e:
                st.error(str(e))

        st.divider()
        uploaded = st.file_uploader("…or upload a document", type=["pdf", "docx", "txt"])
        if uploaded is not None and st.button("⬆️ Summarize document"):
            files = {"file": (uploaded.name, uploaded.getvalue(), uploaded.type or "application/octet-stream")}
            try:
                with httpx.Client(timeout=300.0) as c:
                    r = c.post(f"{API_BASE}/upload", files=files, data={"language": language})
                show_result(r, "summary")
            except Exception as e:
                st.error(str(e))

    with quiz_tab:
        text = st.text_area("Study material", height=200, key="quiz_text")
        count = st.slider("Questions", 1, 50, 10)
        if st.button("❓ Generate quiz"):
            try:
                show_result(post_json("/generate-quiz", {"text": text, "count": count, "language": language}), "quiz")
            except Exception as e:
                st.error(str(e))

    with cards_tab:
        text = st.text_area("Study material", height=200, key="cards_text")
        count = st.slider("Cards", 1, 100, 20)
        if st.button("🃏 Make flashcards"):
            try:
                show_result(post_json("/flashcards", {"text": text, "count": count, "language": language}), "cards")
            except Exception as e:
                st.error(str(e))

    with mindmap_tab:
        text = st.text_area("Topic or material", height=200, key="mindmap_text")
        if st.button("🧠 Build mind map"):
            try:
                show_result(post_json("/mindmap", {"text": text, "language": language}), "mermaid", as_code=True)
            except Exception as e:
                st.error(str(e))

    with plan_tab:
        subjects = st.text_input("Subjects (comma separated)", placeholder="Biology, Chemistry")
        exam_date = st.date_input("Exam date", value=date.today() + timedelta(days=14))
        hours = st.number_input("Hours per day", min_value=0.5, max_value=16.0, value=2.0, step=0.5)
        if st.button("📅 Plan my study"):
            payload = {
                "subjects": [s.strip() for s in subjects.split(",") if s.strip()],
                "examDate": exam_date.isoformat(),
                "hoursPerDay": hours,
                "language": language,
            }
            try:
                show_result(post_json("/study-planner", payload), "plan")
            except Exception as e:
                st.error(str(e))

    with motivation_tab:
        context = st.text_input("What are you working on? (optional)")
        if st.button("🔥 Motivate me"):
            try:
                show_result(post_json("/motivation", {"context": context, "language": language}), "message")
            except Exception as e:
                st.error(str(e))
