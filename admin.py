import streamlit as st

from spa_booking.core.config import settings
from spa_booking.services.report_service import load_bookings_frame, load_testimonials_frame, summarize

# Page Config
st.set_page_config(
    page_title="Spa Booking Admin",
    page_icon="📅",
    layout="centered"
)

st.title("Spa Booking - Admin Panel")

if st.button("Refresh"):
    st.rerun()

bookings = load_bookings_frame(settings.BOOKINGS_FILE, settings.TIMEZONE)

if not bookings.empty:
    summary = summarize(bookings)

    col1, col2, col3 = st.columns(3)
    col1.metric("Bookings", summary["total_bookings"])
    col2.metric("Services", summary["services"])
    col3.metric("Booked hours", f"{summary['booked_minutes'] / 60:.1f}")

    if summary["next_booking"] is not None:
        st.caption(f"Next booking: {summary['next_booking']:%Y-%m-%d %H:%M}")

    st.subheader("Bookings")
    st.dataframe(
        bookings[["id", "start", "end", "service", "duration", "requestedTherapist", "price", "gender", "phone"]],
        use_container_width=True,
        column_config={
            "start": st.column_config.DatetimeColumn("Start", format="D.M.YYYY HH:mm"),
            "end": st.column_config.DatetimeColumn("End", format="HH:mm"),
            "requestedTherapist": "Therapist",
            "id": "ID"
        }
    )
else:
    st.info("No bookings yet.")

testimonials = load_testimonials_frame(settings.TESTIMONIALS_FILE)
if not testimonials.empty:
    st.subheader("Testimonials")
    st.dataframe(
        testimonials[["created_at", "reviewer_name", "rating", "review_title", "review_text"]],
        use_container_width=True,
    )

st.markdown("---")
st.caption(settings.PROJECT_NAME)
