# -*- coding: utf-8 -*-
"""Host implementation on top of IDAPython (IDA Pro 7.4+)"""
import ida_auto
import ida_bytes
import ida_diskio
import ida_funcs
import ida_kernwin
import ida_loader
import ida_name
import ida_nalt
import ida_segment
import idautils

from .host import CHOICE_CANCEL, CHOICE_DEPENDENCIES, CHOICE_FILE, Host, ImportSymbol, LoadOptions

_NEF_FLAGS = {
    LoadOptions.SEGMENTS: ida_loader.NEF_SEGS,
    LoadOptions.RESOURCES: ida_loader.NEF_RSCS,
    LoadOptions.IMPORTS: ida_loader.NEF_IMPS,
    LoadOptions.CODE: ida_loader.NEF_CODE,
    LoadOptions.NAMES: ida_loader.NEF_NAME,
}


def nef_flags(options):
    flags = 0
    for option, nef in _NEF_FLAGS.items():
        if options & option:
            flags |= nef
    return flags


class FolderForm(ida_kernwin.Form):
    """Folder picker"""
    def __init__(self, default=""):
        ida_kernwin.Form.__init__(self, r"""STARTITEM 0
Select Folder

<Resource folder:{folder}>
""", {
            'folder': ida_kernwin.Form.DirInput(value=default),
        })


class IdaHost(Host):
    """Host backed by the current IDA database"""

    def open_input(self, path):
        return ida_diskio.open_linput(path, False)

    def close_input(self, stream):
        ida_diskio.close_linput(stream)

    def build_loaders(self, stream, path):
        return ida_loader.build_loaders_list(stream, path)

    def free_loaders(self, plan):
        # Not exported by every IDAPython build; the list is then owned by Python
        free = getattr(ida_loader, "free_loaders_list", None)
        if free is not None:
            free(plan)

    def load_file(self, path, stream, options, plan):
        return bool(ida_loader.load_nonbinary_file(path, stream, ".", nef_flags(options), plan))

    def segment_count(self):
        return ida_segment.get_segm_qty()

    def get_segment(self, index):
        return ida_segment.getnseg(index)

    def segment_name(self, segment):
        return ida_segment.get_segm_name(segment)

    def set_segment_name(self, segment, name):
        ida_segment.set_segm_name(segment, name)

    def get_segment_comment(self, segment):
        return ida_segment.get_segment_cmt(segment, False)

    def set_segment_comment(self, segment, text):
        ida_segment.set_segment_cmt(segment, text, False)

    def set_comment(self, ea, text, repeatable):
        ida_bytes.set_cmt(ea, text, repeatable)

    def functions(self):
        for ea in idautils.Functions():
            yield ea, ida_funcs.get_func_name(ea), ida_name.is_public_name(ea)

    def import_modules(self):
        return [ida_nalt.get_import_module_name(i) or "" for i in range(ida_nalt.get_import_module_qty())]

    def import_entries(self, module_index):
        entries = []

        def cb(ea, name, ordinal):
            entries.append(ImportSymbol(ea, name or None, ordinal))
            return True

        ida_nalt.enum_import_names(module_index, cb)
        return entries

    def ask_choice(self, question):
        answer = ida_kernwin.ask_buttons("File", "Dependencies", "Cancel", ida_kernwin.ASKBTN_CANCEL, question)
        if answer == ida_kernwin.ASKBTN_YES:
            return CHOICE_FILE
        if answer == ida_kernwin.ASKBTN_NO:
            return CHOICE_DEPENDENCIES
        return CHOICE_CANCEL

    def ask_folder(self, default=""):
        form = FolderForm(default)
        form.Compile()
        try:
            if form.Execute() != 1:
                return None
            return form.folder.value or None
        finally:
            form.Free()

    def ask_file(self, default=""):
        return ida_kernwin.ask_file(False, default or "*", "Select a file to load")

    def warning(self, text):
        ida_kernwin.warning(text)

    def show_wait_box(self, text):
        ida_kernwin.show_wait_box(text)

    def replace_wait_box(self, text):
        ida_kernwin.replace_wait_box(text)

    def hide_wait_box(self):
        ida_kernwin.hide_wait_box()

    def user_cancelled(self):
        return ida_kernwin.user_cancelled()

    def wait_for_analysis(self):
        ida_auto.auto_wait()
