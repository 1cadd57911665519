import tkinter as tk
from tkinter import messagebox, scrolledtext
import threading

from refchat.client.api_client import ChatApiClient
from refchat.client.feedback import FeedbackTracker
from refchat.client.session_cache import SessionCache
from refchat.client.session_list import SessionListController
from refchat.client.table_view import format_table
from refchat.config.settings import settings
from refchat.domain.exceptions import BusinessError
from refchat.infrastructure.logging.logger import logger


class App:
    def __init__(self, root, api=None):
        self.root = root
        self.root.title("RefChat Console")
        self.api = api or ChatApiClient(settings)
        self.sessions = SessionListController(self.api)
        self.cache = SessionCache(self.api)
        self.feedback = FeedbackTracker()
        main = tk.PanedWindow(root, orient=tk.HORIZONTAL)
        main.pack(fill=tk.BOTH, expand=True)
        left = tk.Frame(main)
        right = tk.Frame(main)
        main.add(left, minsize=260)
        main.add(right)
        tk.Label(left, text="Chats").pack(anchor=tk.W)
        self.conv_list = tk.Listbox(left, height=20)
        self.conv_list.pack(fill=tk.BOTH, expand=True)
        self.conv_list.bind("<<ListboxSelect>>", self.on_select_conv)
        lf_btns = tk.Frame(left)
        lf_btns.pack(fill=tk.X)
        tk.Button(lf_btns, text="Refresh", command=self.refresh_convs).pack(side=tk.LEFT)
        tk.Button(lf_btns, text="New Chat", command=self.create_conv).pack(side=tk.LEFT)
        tk.Button(lf_btns, text="Delete", command=self.delete_conv).pack(side=tk.LEFT)
        self.chat = scrolledtext.ScrolledText(right, width=100, height=30, font="TkFixedFont")
        self.chat.pack(fill=tk.BOTH, expand=True)
        self.chat.tag_config("user", foreground="#1a73e8")
        self.chat.tag_config("assistant", foreground="#34a853")
        self.chat.tag_config("system", foreground="#5f6368")
        self.chat.tag_config("error", foreground="#d93025")
        fb = tk.Frame(right)
        fb.pack(fill=tk.X)
        tk.Button(fb, text="👍", command=lambda: self.on_vote("like")).pack(side=tk.LEFT)
        tk.Button(fb, text="👎", command=lambda: self.on_vote("dislike")).pack(side=tk.LEFT)
        rt_in = tk.Frame(right)
        rt_in.pack(fill=tk.X)
        self.entry = tk.Entry(rt_in)
        self.entry.pack(side=tk.LEFT, fill=tk.X, expand=True)
        self.entry.bind("<Return>", self.on_send_event)
        self.send_btn = tk.Button(rt_in, text="Send", command=self.on_send)
        self.send_btn.pack(side=tk.LEFT)
        self.status = tk.Label(right, text="Ready")
        self.status.pack(fill=tk.X)
        self.refresh_convs()

    def _report(self, title, err):
        logger.error(title, extra={"extra": {"error": str(err)}})
        self.status.config(text=title)
        messagebox.showerror(title, getattr(err, "message", str(err)))

    def refresh_convs(self):
        try:
            items = self.sessions.refresh()
        except BusinessError as e:
            self._report("Failed to load sessions", e)
            return
        self.conv_list.delete(0, tk.END)
        for s in items:
            marker = "* " if self.sessions.is_active(s.session_id) else "  "
            self.conv_list.insert(tk.END, f"{marker}{s.title}")

    def create_conv(self):
        try:
            sid = self.sessions.create()
        except BusinessError as e:
            self._report("Failed to create new chat", e)
            return
        self.open_session(sid)
        self.refresh_convs()

    def delete_conv(self):
        sid = self.sessions.active_id
        if not sid:
            return
        try:
            deleted = self.sessions.delete(sid, lambda prompt: messagebox.askyesno("Delete chat", prompt))
        except BusinessError as e:
            self._report("Failed to delete session", e)
            return
        if deleted:
            if self.sessions.active_id is None:
                self.cache.close()
                self.render_messages()
            self.refresh_convs()

    def on_select_conv(self, event):
        sel = self.conv_list.curselection()
        if not sel:
            return
        summaries = self.sessions.summaries
        if sel[0] >= len(summaries):
            return
        self.sessions.select(summaries[sel[0]].session_id)
        self.open_session(self.sessions.active_id)

    def open_session(self, session_id):
        self.set_sending(False)
        try:
            self.cache.open(session_id)
        except BusinessError as e:
            self._report("Failed to load session", e)
        self.render_messages()
        self.status.config(text=f"Session: {session_id}")

    def render_messages(self):
        self.chat.delete(1.0, tk.END)
        msgs = self.cache.messages
        if not msgs:
            self.chat.insert(tk.END, "Start a conversation by typing a message below.\n", "system")
        for m in msgs:
            self.chat.insert(tk.END, f"{m.role}: {m.text}\n", m.role)
            table = format_table(m.table)
            if table:
                self.chat.insert(tk.END, table + "\n", m.role)
            if m.answer_id and self.feedback.vote(m.answer_id):
                self.chat.insert(tk.END, f"[{self.feedback.vote(m.answer_id)}]\n", "system")
            self.chat.insert(tk.END, f"{m.timestamp}\n\n", "system")
        if self.cache.sending:
            self.chat.insert(tk.END, "assistant: ...\n", "system")
        self.chat.see(tk.END)

    def set_sending(self, sending):
        self.send_btn.config(state=tk.DISABLED if sending else tk.NORMAL)
        self.status.config(text="Sending..." if sending else "Ready")

    def on_send(self):
        if self.cache.sending:
            return
        text = self.entry.get().strip()
        if not text:
            return
        try:
            pending = self.cache.begin_send(text)
        except BusinessError as e:
            self._report("Cannot send", e)
            return
        self.entry.delete(0, tk.END)
        self.set_sending(True)
        self.render_messages()

        def worker():
            try:
                reply = self.api.ask(pending.session_id, pending.user_message.text)
                self.root.after(0, lambda: self.on_response(pending, reply, None))
            except Exception as e:
                self.root.after(0, lambda err=e: self.on_response(pending, None, err))
        threading.Thread(target=worker, daemon=True).start()

    def on_send_event(self, event):
        self.on_send()
        return "break"

    def on_response(self, pending, reply, err):
        if not err:
            try:
                applied = self.cache.complete(pending, reply)
            except BusinessError as e:
                err = e
        if err:
            applied = self.cache.fail(pending, err)
            if applied:
                self._report("Failed to send message", err)
        if not applied:
            # 会话已切换，丢弃过期回包
            return
        self.set_sending(False)
        self.render_messages()
        self.refresh_convs()

    def on_vote(self, vote):
        answers = [m for m in self.cache.messages if m.answer_id]
        if not answers:
            return
        self.feedback.toggle(answers[-1].answer_id, vote)
        self.render_messages()


def main():
    root = tk.Tk()
    App(root)
    root.mainloop()


if __name__ == "__main__":
    main()
