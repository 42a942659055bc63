"""
OS Algorithm Visualizer — CPU Scheduling & Page Replacement

This application provides an interactive simulation and visualization of two
core Operating System teaching topics:
    - CPU Scheduling (FCFS, SJF, Priority, Round Robin)
    - Page Replacement (FIFO, LRU, Optimal, Clock)

The simulators live in scheduling.py and paging.py and are pure functions;
this file only collects inputs, calls them, and draws the results.

Built with Streamlit for the web interface and Plotly for visualizations.
"""

# =============================================================================
# IMPORTS
# =============================================================================

import logging                               # Run summaries to the console
import streamlit as st                       # Web application framework
import plotly.graph_objects as go            # Interactive plotting library

import config                                # Defaults, limits, logging setup
from models import SimulationInputError, add_process, move_process, remove_process, update_process
from paging import (ReplacementPolicy, TITLES as POLICY_TITLES, describe_step,
                    fault_counts, parse_reference_string, simulate_page_replacement,
                    validate_frame_count)
from playback import start_playback
from scheduling import (SchedulingAlgorithm, TITLES as ALGORITHM_TITLES, run_schedule,
                        validate_quantum)
from utils import EMPTY_COLOR, HIT_COLOR, frame_label, process_rows, step_color, step_rows

config.setup_logging()
logger = logging.getLogger("visualizer")


# =============================================================================
# ALGORITHM NOTES - shown by the "About this algorithm" expanders
# =============================================================================

SCHEDULING_INFO = {
    SchedulingAlgorithm.FCFS: {
        "description": "Runs processes in the order they arrive. Non-preemptive.",
        "pros": ["Simple to implement", "Fair in arrival order"],
        "cons": ["Convoy effect behind long jobs", "Ignores burst length"],
    },
    SchedulingAlgorithm.SJF: {
        "description": "Whenever the CPU frees up, runs the arrived process with the smallest burst. Non-preemptive.",
        "pros": ["Minimal average waiting time", "Good for batch systems"],
        "cons": ["Long jobs can starve", "Burst time must be known up front"],
    },
    SchedulingAlgorithm.PRIORITY: {
        "description": "Whenever the CPU frees up, runs the arrived process with the lowest priority number. Non-preemptive.",
        "pros": ["Important work goes first", "Easy to reason about"],
        "cons": ["Low priority jobs can starve", "Priorities must be assigned"],
    },
    SchedulingAlgorithm.ROUND_ROBIN: {
        "description": "Each process gets at most one time quantum, then goes to the back of the ready queue.",
        "pros": ["Fair CPU sharing", "Good response time"],
        "cons": ["Depends heavily on quantum size", "More context switches"],
    },
}

PAGING_INFO = {
    ReplacementPolicy.FIFO: {
        "description": "Replaces the page that has been in memory the longest.",
        "pros": ["Simple", "No bookkeeping on hits"],
        "cons": ["May evict hot pages", "Suffers from Belady's anomaly"],
    },
    ReplacementPolicy.LRU: {
        "description": "Replaces the page that has gone unused for the longest time.",
        "pros": ["Good performance in practice", "No Belady's anomaly"],
        "cons": ["Needs per-access timestamps", "Higher overhead"],
    },
    ReplacementPolicy.OPT: {
        "description": "Replaces the page that will not be needed for the longest time.",
        "pros": ["Fewest possible faults", "Benchmark for other policies"],
        "cons": ["Needs the future reference string", "Not implementable in a real OS"],
    },
    ReplacementPolicy.CLOCK: {
        "description": "FIFO with a reference bit: recently used pages get a second chance.",
        "pros": ["Cheap approximation of LRU", "Low overhead"],
        "cons": ["Less accurate than LRU", "Hand may sweep the whole ring"],
    },
}


def show_info(info):
    st.write(info["description"])
    pros_col, cons_col = st.columns(2)
    with pros_col:
        st.markdown("**Advantages**\n" + "\n".join(f"- {p}" for p in info["pros"]))
    with cons_col:
        st.markdown("**Disadvantages**\n" + "\n".join(f"- {c}" for c in info["cons"]))


# =============================================================================
# CHARTS
# =============================================================================

def gantt_figure(result, current_time=None):
    """Horizontal bars, one per dispatch, coloured per process."""
    colors = {p.id: p.color for p in result.processes}
    fig = go.Figure()

    for entry in result.timeline:
        fig.add_trace(go.Bar(
            y=[entry.process],
            x=[entry.duration],
            base=[entry.time],
            orientation="h",
            marker_color=colors.get(entry.process_id, EMPTY_COLOR),
            text=f"{entry.time}-{entry.end}",
            hovertext=f"{entry.process}: t={entry.time}, remaining={entry.remaining_time}, ran {entry.duration}",
            hoverinfo="text",
        ))

    if current_time is not None:
        fig.add_vline(x=current_time, line_dash="dash", line_color="black")

    fig.update_layout(
        height=120 + 40 * len(result.processes),
        showlegend=False,
        barmode="overlay",
        xaxis_title="Time",
        yaxis=dict(autorange="reversed"),
    )
    return fig


def frames_figure(step):
    """Bar per frame labelled with its page, green where this step hit."""
    fig = go.Figure()
    x, y, text, colors = [], [], [], []

    for i, f in enumerate(step.frames):
        text.append(frame_label(f))
        x.append(i)
        y.append(1)
        if f.page is None:
            colors.append(EMPTY_COLOR)
        elif i == step.frame_index:
            colors.append(step_color(step.is_hit))
        else:
            colors.append("lightblue")

    fig.add_trace(go.Bar(x=x, y=y, text=text, marker_color=colors, hovertext=text, hoverinfo="text"))
    fig.update_layout(height=150, showlegend=False, yaxis=dict(showticklabels=False))
    return fig


# =============================================================================
# PAGE SETUP & NAVIGATION
# =============================================================================

st.set_page_config(page_title="OS Algorithm Visualizer", layout="wide")

page = st.sidebar.radio("Choose View", ["Concepts", "CPU Scheduling", "Page Replacement"])

st.title("OS Algorithm Visualizer — CPU Scheduling & Page Replacement")


# =============================================================================
# CONCEPTS PAGE - Educational Content
# =============================================================================

if page == "Concepts":
    st.header("Operating System Concepts Used in This Project")
    st.markdown(
        """
        ### **1. CPU Scheduling**
        - A process needs the CPU for its **burst time**, starting no earlier than its **arrival time**.
        - The scheduler decides which ready process runs next.
        - **Waiting time** = time spent ready but not running.
        - **Turnaround time** = completion time − arrival time.

        ### **2. Preemption**
        - Non-preemptive algorithms (FCFS, SJF, Priority) run a process to completion.
        - Round Robin stops a process after one **time quantum** and requeues it.

        ### **3. Paging**
        - Physical memory is split into **frames**, each holding one page.
        - Referencing a page that is not in any frame is a **page fault**.

        ### **4. Page Replacement**
        - When all frames are full, a fault must evict a page.
        - The policy decides which one: FIFO, LRU, Optimal or Clock.

        ### **5. Belady's Anomaly**
        - With FIFO, adding frames can *increase* the number of faults.
        - Try `1,2,3,4,1,2,5,1,2,3,4,5` with 3 and then 4 frames.
        """
    )
    st.stop()


# =============================================================================
# CPU SCHEDULING PAGE
# =============================================================================

if page == "CPU Scheduling":
    st.header("CPU Scheduling Visualizer")

    # ----- Sidebar settings -----
    st.sidebar.header("Scheduling Settings")
    algorithm = st.sidebar.selectbox(
        "Algorithm",
        options=list(SchedulingAlgorithm),
        format_func=lambda a: ALGORITHM_TITLES[a],
    )
    quantum = None
    if algorithm is SchedulingAlgorithm.ROUND_ROBIN:
        quantum = st.sidebar.number_input("Time quantum", min_value=1, value=config.DEFAULT_QUANTUM, step=1)

    if algorithm in SCHEDULING_INFO:
        with st.expander(f"About {ALGORITHM_TITLES[algorithm]}"):
            show_info(SCHEDULING_INFO[algorithm])
    else:
        st.info(f"{ALGORITHM_TITLES[algorithm]} is not implemented yet; the simulation runs FCFS.")

    # ----- Process list (session state) -----
    if "processes" not in st.session_state:
        st.session_state.processes = []
    processes = st.session_state.processes

    if st.button("Add Process"):
        st.session_state.processes = add_process(processes)
        st.rerun()

    action = None
    for i, p in enumerate(processes):
        cols = st.columns([2, 1, 1, 1, 0.5, 0.5, 0.5])
        name = cols[0].text_input("Name", value=p.name, key=f"name_{p.id}")
        arrival = cols[1].number_input("Arrival", min_value=0, value=p.arrival_time, step=1, key=f"arr_{p.id}")
        burst = cols[2].number_input("Burst", min_value=1, value=p.burst_time, step=1, key=f"burst_{p.id}")
        priority = p.priority
        if algorithm is SchedulingAlgorithm.PRIORITY:
            priority = cols[3].number_input("Priority", min_value=1, value=p.priority or config.DEFAULT_PRIORITY,
                                            step=1, key=f"prio_{p.id}")

        for field_name, value, old in (("name", name, p.name), ("arrival_time", arrival, p.arrival_time),
                                       ("burst_time", burst, p.burst_time), ("priority", priority, p.priority)):
            if value != old:
                processes = update_process(processes, i, field_name, value)

        if cols[4].button("↑", key=f"up_{p.id}", disabled=i == 0):
            action = ("move", i, i - 1)
        if cols[5].button("↓", key=f"down_{p.id}", disabled=i == len(processes) - 1):
            action = ("move", i, i + 1)
        if cols[6].button("✕", key=f"del_{p.id}"):
            action = ("remove", i)

    st.session_state.processes = processes

    if action is not None:
        if action[0] == "move":
            st.session_state.processes = move_process(processes, action[1], action[2])
        else:
            st.session_state.processes = remove_process(processes, action[1])
        st.rerun()

    # ----- Run -----
    play = False
    if st.button("Start Simulation", disabled=not processes):
        try:
            if algorithm is SchedulingAlgorithm.ROUND_ROBIN:
                quantum = validate_quantum(quantum)
            st.session_state.schedule_result = run_schedule(processes, algorithm, quantum)
            play = True
        except SimulationInputError as e:
            st.error(str(e))

    result = st.session_state.get("schedule_result")
    if result is not None:
        time_display = st.empty()
        chart = st.empty()

        if play:
            playback = start_playback(st.session_state, result.timeline)

            def on_tick(entry):
                time_display.metric("Current time", entry.time, help=f"Running {entry.process}")
                chart.plotly_chart(gantt_figure(result, entry.time), use_container_width=True)

            playback.run(on_tick)

        last = result.timeline[-1].end if result.timeline else 0
        time_display.metric("Current time", last)
        chart.plotly_chart(gantt_figure(result), use_container_width=True)

        st.subheader("Statistics")
        c1, c2 = st.columns(2)
        c1.metric("Average waiting time", f"{result.average_waiting_time:.2f}")
        c2.metric("Average turnaround time", f"{result.average_turnaround_time:.2f}")
        st.table(process_rows(result.processes))

        st.subheader("Timeline")
        st.table([e.to_dict() for e in result.timeline])


# =============================================================================
# PAGE REPLACEMENT PAGE
# =============================================================================

if page == "Page Replacement":
    st.header("Page Replacement Visualizer")

    # ----- Sidebar settings -----
    st.sidebar.header("Replacement Settings")
    policy = st.sidebar.selectbox(
        "Replacement Policy",
        options=list(ReplacementPolicy),
        format_func=lambda p: POLICY_TITLES[p],
    )
    frame_count = st.sidebar.slider(
        "Frames",
        min_value=config.MIN_FRAMES,
        max_value=config.MAX_FRAMES,
        value=config.DEFAULT_FRAME_COUNT,
    )
    access_input = st.sidebar.text_area(
        "Page reference sequence (comma or space separated)",
        value=config.DEFAULT_REFERENCE_STRING,
    )

    with st.expander(f"About {POLICY_TITLES[policy]}"):
        show_info(PAGING_INFO[policy])

    if st.button("Run Simulation"):
        sequence = parse_reference_string(access_input)
        if not sequence:
            st.warning("No page numbers to run")
        else:
            try:
                validate_frame_count(frame_count)
                st.session_state.paging_result = simulate_page_replacement(sequence, frame_count, policy)
                st.session_state.paging_sequence = sequence
            except SimulationInputError as e:
                st.error(str(e))

    result = st.session_state.get("paging_result")
    if result is not None and result.history:
        col1, col2 = st.columns([1, 2])

        # ----- Left column: statistics and event log -----
        with col1:
            st.subheader("Statistics")
            st.metric("Page References", result.total_refs)
            st.metric("Page Faults", result.faults)
            st.metric("Hit Rate", f"{result.hit_rate:.1f}%")

            st.subheader("Event Log")
            events = [line for s in result.history for line in describe_step(s)]
            for ev in events[-20:][::-1]:
                st.write(ev)

        # ----- Right column: frames, trace, charts -----
        with col2:
            st.subheader(f"Frames ({result.policy}, {result.frame_count} frames)")
            step_no = st.slider("Step", min_value=1, max_value=len(result.history), value=len(result.history))
            step = result.history[step_no - 1]
            st.write(f"Reference **{step.page}** → {'HIT' if step.is_hit else 'FAULT'}")
            st.plotly_chart(frames_figure(step), use_container_width=True)

            st.subheader("Trace")
            st.table(step_rows(result.history[:step_no]))

            fig = go.Figure()
            fig.add_trace(go.Bar(
                x=["Hits", "Faults"],
                y=[result.hits, result.faults],
                marker_color=[HIT_COLOR, step_color(False)],
            ))
            fig.update_layout(height=300, title="Hits vs Faults")
            st.plotly_chart(fig, use_container_width=True)

            curve = fault_counts(st.session_state.paging_sequence, result.policy)
            fig2 = go.Figure()
            fig2.add_trace(go.Scatter(x=list(curve), y=list(curve.values()), mode="lines+markers"))
            fig2.update_layout(height=300, title="Faults by frame count", xaxis_title="Frames",
                               yaxis_title="Faults")
            st.plotly_chart(fig2, use_container_width=True)

    st.markdown("---")
    st.markdown(
        "**Instructor examples**:\n"
        "1) Belady's anomaly: FIFO with `1,2,3,4,1,2,5,1,2,3,4,5`, "
        "3 frames → 9 faults, 4 frames → 10 faults.\n"
        "2) LRU demo: 2 frames and `1,2,1,3` evicts page 2, not page 1."
    )
