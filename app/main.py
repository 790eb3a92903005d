"""
Streamlit Frontend for homekeep

A thin shell over the managers: every button calls one manager method,
then the script reruns and redraws from the manager caches.

Pages:
1. Declutter - rooms, items, categories, import
2. Clean - today's due tasks by room
3. Progress - totals, streaks, recommendations, snapshots
"""

import tempfile
from pathlib import Path

import streamlit as st

from homekeep.bootstrap import AppComponents, create_app_components
from homekeep.insights import recommend_rooms, render_status_report, summarize_recommendations
from homekeep.managers import sort_items
from homekeep.models.home import ItemCategory, RoomIcon, SortMode, TaskFrequency


st.set_page_config(
    page_title="homekeep",
    page_icon="🧹",
    layout="wide",
    initial_sidebar_state="expanded",
)


@st.cache_resource
def get_components() -> AppComponents:
    """Get or create application components (cached)."""
    return create_app_components()


def show_error(manager) -> None:
    if manager.error_message:
        st.error(manager.error_message)
        manager.clear_error()


def main():
    """Main application entry point."""
    app = get_components()

    st.sidebar.title("🧹 homekeep")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📦 Declutter", "🧽 Clean", "📊 Progress"],
        index=0,
    )

    if page == "📦 Declutter":
        render_declutter_page(app)
    elif page == "🧽 Clean":
        render_clean_page(app)
    elif page == "📊 Progress":
        render_progress_page(app)


# =============================================================================
# DECLUTTER
# =============================================================================

def render_declutter_page(app: AppComponents):
    st.title("📦 Declutter")
    rooms = app.rooms
    rooms.load_rooms()

    with st.expander("➕ Add room"):
        with st.form("add_room", clear_on_submit=True):
            name = st.text_input("Room name")
            icon = st.selectbox("Icon", list(RoomIcon), format_func=lambda i: i.label)
            if st.form_submit_button("Add"):
                rooms.add_room(name, icon)
    show_error(rooms)

    if not rooms.rooms:
        st.info("No rooms yet. Add one to get started.")
        return

    for room in rooms.rooms:
        col1, col2 = st.columns([4, 1])
        with col1:
            st.markdown(f"**{room.name}**  ·  {room.item_count} items")
            st.progress(min(room.declutter_progress, 1.0))
        with col2:
            if st.button("Open", key=f"open_{room.id}"):
                st.session_state.room_id = room.id

    room_id = st.session_state.get("room_id")
    room = rooms.room(room_id) if room_id is not None else None
    if room is None:
        return

    st.markdown("---")
    render_room_detail(app, room)


def render_room_detail(app: AppComponents, room):
    declutter = app.declutter
    declutter.load_items(room.id)
    st.header(room.name)

    actions = st.columns(4)
    if actions[0].button("✅ Mark decluttered", disabled=not room.can_mark_decluttered):
        app.rooms.mark_decluttered(room.id)
        st.rerun()
    if actions[1].button("📸 Take snapshot"):
        app.snapshots.take_snapshot(room.id, declutter.items)
        st.success("Snapshot saved")
    autogroup_label = "Clear autogroup" if declutter.is_autogrouped else "Autogroup items"
    if actions[2].button(autogroup_label):
        if declutter.is_autogrouped:
            declutter.clear_autogroups(room.id)
        else:
            declutter.autogroup_items(room.id)
        st.rerun()
    if actions[3].button("🗑️ Delete room"):
        app.rooms.delete_room(room.id)
        st.session_state.room_id = None
        st.rerun()

    with st.expander("➕ Add items"):
        with st.form("add_item", clear_on_submit=True):
            name = st.text_input("Item name")
            is_furniture = st.checkbox("Furniture")
            photo = st.file_uploader("Photo", type=["jpg", "jpeg", "png", "webp"])
            if st.form_submit_button("Add item"):
                photo_path = app.photos.save_photo(photo.read()) if photo else None
                declutter.add_item(room.id, name, is_furniture=is_furniture, photo_path=photo_path)

        pasted = st.text_area("Paste a list (commas, semicolons or one per line)")
        if st.button("Add pasted items"):
            added = declutter.add_items_from_text(room.id, pasted)
            if added:
                st.success(f"Added {added} items")

        upload = st.file_uploader("Import from text file", type=["txt", "csv"])
        if upload and st.button("Import file"):
            with tempfile.TemporaryDirectory() as tmp:
                path = Path(tmp) / upload.name
                path.write_bytes(upload.read())
                added = declutter.import_from_file(room.id, path)
            if added:
                st.success(f"Added {added} items from file as uncategorized.")
    show_error(declutter)

    mode = st.radio(
        "Sort",
        list(SortMode),
        format_func=lambda m: m.label,
        index=list(SortMode).index(declutter.sort_mode),
        horizontal=True,
    )
    declutter.sort_mode = mode

    categories = list(ItemCategory)
    for category in categories:
        section = sort_items(declutter.items_for(category), declutter.sort_mode)
        if not section:
            continue
        st.subheader(f"{category.label} ({len(section)})")
        for index, item in enumerate(section):
            cols = st.columns([3, 2, 1, 1, 1])
            label = item.name
            if item.auto_group:
                label += f"  `{item.auto_group}`"
            if item.is_furniture:
                label += "  🪑"
            cols[0].markdown(label)
            chosen = cols[1].selectbox(
                "Category",
                categories,
                index=categories.index(item.category),
                format_func=lambda c: c.label,
                key=f"cat_{item.id}",
                label_visibility="collapsed",
            )
            if chosen is not item.category:
                declutter.categorize(item.id, chosen, room.id)
                st.rerun()
            if cols[2].button("↑", key=f"up_{item.id}", disabled=index == 0):
                declutter.move_item(room.id, index, index - 1, category=category)
                st.rerun()
            if cols[3].button("🪑", key=f"furn_{item.id}"):
                declutter.toggle_furniture(item.id, not item.is_furniture, room.id)
                st.rerun()
            if cols[4].button("✖", key=f"del_{item.id}"):
                declutter.delete_item(item.id, room.id)
                st.rerun()


# =============================================================================
# CLEAN
# =============================================================================

def render_clean_page(app: AppComponents):
    st.title("🧽 Clean")
    cleaning = app.cleaning
    cleaning.load_due_tasks()

    col1, col2 = st.columns(2)
    col1.metric("Current streak", f"{cleaning.current_streak} days")
    col2.metric("Completed today", cleaning.completed_today_count)

    if not cleaning.due_tasks:
        st.success("Nothing due today.")

    for group in cleaning.tasks_by_room:
        st.subheader(group.room_name)
        for task in group.tasks:
            cols = st.columns([4, 1])
            cols[0].markdown(f"{task.name} · {task.frequency.label}")
            if cols[1].button("Done", key=f"done_{task.id}"):
                cleaning.complete_task(task.id)
                st.rerun()

    decluttered = app.rooms.decluttered_rooms
    if decluttered:
        with st.expander("➕ Add task"):
            with st.form("add_task", clear_on_submit=True):
                room = st.selectbox("Room", decluttered, format_func=lambda r: r.name)
                name = st.text_input("Task name")
                frequency = st.selectbox(
                    "Frequency", list(TaskFrequency), index=1, format_func=lambda f: f.label
                )
                if st.form_submit_button("Add"):
                    cleaning.add_task(room.id, name, frequency)
    show_error(cleaning)


# =============================================================================
# PROGRESS
# =============================================================================

def render_progress_page(app: AppComponents):
    st.title("📊 Progress")
    progress = app.progress
    progress.load_stats()
    summary = progress.summary

    cols = st.columns(4)
    cols[0].metric("Items", summary.total_items)
    cols[1].metric("Categorized", f"{int(summary.progress * 100)}%")
    cols[2].metric("Rooms decluttered", f"{summary.rooms_decluttered}/{summary.total_rooms}")
    cols[3].metric("Streak", f"{summary.current_streak} (best {summary.longest_streak})")

    st.subheader("By category")
    st.bar_chart({c.label: [n] for c, n in progress.category_breakdown.items()})

    if progress.daily_counts:
        st.subheader("Completions per day")
        st.bar_chart({str(d.day): [d.count] for d in progress.daily_counts})

    app.rooms.load_rooms()
    rooms = app.rooms.rooms
    recommendations = recommend_rooms(rooms)
    if recommendations:
        st.subheader("Where to focus next")
        for rec in recommendations:
            st.markdown(f"**{rec.room_name}**: {rec.reason}")
        overview = summarize_recommendations(recommendations)
        st.caption(
            f"{overview.rooms_remaining} rooms remaining · "
            f"{overview.items_to_categorize} items to categorize"
        )
    else:
        st.success("All rooms are decluttered. Great work!")

    st.subheader("Snapshot history")
    if rooms:
        room = st.selectbox("Room", rooms, format_func=lambda r: r.name, key="snap_room")
        app.snapshots.load_snapshots(room.id)
        for delta in reversed(app.snapshots.deltas(room.id)):
            st.markdown(
                f"{delta.to_snapshot.snapshot_date:%Y-%m-%d}: "
                f"{delta.items_delta:+d} items, {delta.categorized_delta:+d} categorized"
            )

    with st.expander("Share status"):
        st.code(render_status_report(rooms), language=None)


if __name__ == "__main__":
    main()
